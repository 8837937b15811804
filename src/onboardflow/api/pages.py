"""Browser pages for photographers and clients."""

import json
from html import escape

from fastapi import APIRouter
from fastapi.responses import HTMLResponse, RedirectResponse

router = APIRouter(tags=["pages"])


@router.get("/", include_in_schema=False)
async def index() -> RedirectResponse:
    return RedirectResponse(url="/create")


@router.get("/create", response_class=HTMLResponse)
async def create_page() -> HTMLResponse:
    """Magic link creation form."""
    return HTMLResponse(_CREATE_HTML)


@router.get("/client/{slug}", response_class=HTMLResponse)
async def client_portal_page(slug: str) -> HTMLResponse:
    """Client portal: review, sign, pay."""
    slug_literal = json.dumps(slug).replace("<", "\\u003c")
    return HTMLResponse(_PORTAL_HTML.replace("__SLUG__", slug_literal))


@router.get("/success", response_class=HTMLResponse)
async def success_page(session_id: str | None = None) -> HTMLResponse:
    """Landing page after a completed checkout."""
    return HTMLResponse(
        _SUCCESS_HTML.replace("__SESSION_ID__", escape(session_id or "N/A"))
    )


_STYLE = """
    <style>
      body { font-family: ui-sans-serif, system-ui, sans-serif; background: #f9fafb;
             margin: 0; padding: 3rem 1rem; color: #111827; }
      main { max-width: 36rem; margin: 0 auto; background: #fff; padding: 1.5rem;
             border-radius: 0.5rem; box-shadow: 0 4px 12px rgba(0,0,0,0.08); }
      h1 { text-align: center; }
      label { display: block; margin-top: 1rem; font-size: 0.9rem; }
      input { width: 100%; padding: 0.5rem; box-sizing: border-box; }
      button { padding: 0.6rem 1rem; margin-top: 1rem; width: 100%; cursor: pointer; }
      button:disabled { opacity: 0.5; cursor: not-allowed; }
      canvas { border: 2px solid #d1d5db; border-radius: 0.5rem; width: 100%;
               touch-action: none; }
      .error { background: #fef2f2; color: #b91c1c; padding: 0.75rem; }
      .steps { display: flex; justify-content: space-between; margin-bottom: 1rem; }
      .step.active { font-weight: bold; }
      .step.done { color: #16a34a; }
      .hidden { display: none; }
      code { word-break: break-all; }
    </style>
"""

_CREATE_HTML = f"""<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>Create Your Magic Link</title>
    {_STYLE}
  </head>
  <body>
    <main>
      <h1>Create Your Magic Link</h1>
      <p>Replace 5 emails with 1 link. Your assistant will handle the rest.</p>
      <div id="error" class="error hidden"></div>
      <form id="form">
        <label>Your Email<input name="photographerEmail" type="email" required /></label>
        <label>Client's Email<input name="clientEmail" type="email" required /></label>
        <label>Project Name<input name="projectName" type="text" required /></label>
        <label>Deposit Amount ($)
          <input name="amount" type="number" min="1" step="0.01" required />
        </label>
        <button id="submit" type="submit">Create Magic Link</button>
      </form>
      <div id="result" class="hidden">
        <h2>Magic Link Created!</h2>
        <p>Send this link to your client:</p>
        <code id="link"></code>
        <button onclick="navigator.clipboard.writeText(
          document.getElementById('link').textContent)">Copy Link</button>
        <button onclick="location.reload()">Create Another Link</button>
      </div>
    </main>
    <script>
      const form = document.getElementById('form');
      form.addEventListener('submit', async (event) => {{
        event.preventDefault();
        const button = document.getElementById('submit');
        const error = document.getElementById('error');
        button.disabled = true;
        button.textContent = 'Creating Magic Link...';
        error.classList.add('hidden');
        const body = Object.fromEntries(new FormData(form).entries());
        const res = await fetch('/api/links', {{
          method: 'POST',
          headers: {{ 'Content-Type': 'application/json' }},
          body: JSON.stringify(body)
        }});
        button.disabled = false;
        button.textContent = 'Create Magic Link';
        if (!res.ok) {{
          error.textContent = 'Something went wrong. Please try again.';
          error.classList.remove('hidden');
          return;
        }}
        const data = await res.json();
        document.getElementById('link').textContent = data.url;
        form.classList.add('hidden');
        document.getElementById('result').classList.remove('hidden');
      }});
    </script>
  </body>
</html>
"""

_PORTAL_HTML = f"""<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>Your Booking</title>
    {_STYLE}
  </head>
  <body>
    <main>
      <h1 id="title">Loading your portal...</h1>
      <div id="portal" class="hidden">
        <div class="steps">
          <span class="step" data-step="1">1. Review Contract</span>
          <span class="step" data-step="2">2. Sign Contract</span>
          <span class="step" data-step="3">3. Pay Deposit</span>
        </div>
        <section data-panel="1">
          <h2>Review Contract</h2>
          <p><strong>Project:</strong> <span data-field="project_name"></span></p>
          <p><strong>Client:</strong> <span data-field="client_email"></span></p>
          <p><strong>Deposit:</strong> <span data-field="deposit"></span></p>
          <p><strong>Terms:</strong> 50% deposit required to secure booking.
             Balance due on delivery.</p>
          <button onclick="showStep(2)">I Agree - Continue to Sign</button>
        </section>
        <section data-panel="2">
          <h2>Sign Contract</h2>
          <p>Please sign below to agree to the terms.</p>
          <canvas id="pad" width="500" height="200"></canvas>
          <button onclick="clearPad()">Clear</button>
          <button id="sign" disabled onclick="submitSignature()">Save Signature</button>
        </section>
        <section data-panel="3">
          <h2>Pay Deposit</h2>
          <p><strong data-field="deposit"></strong></p>
          <p>50% deposit to secure your booking</p>
          <button onclick="pay()">Pay Securely with Stripe</button>
        </section>
        <section data-panel="4">
          <h2>Booking Confirmed!</h2>
          <p>Thank you! Your deposit has been received and your booking is confirmed.</p>
        </section>
      </div>
      <p>Need help? Contact the photographer directly.</p>
    </main>
    <script>
      const slug = encodeURIComponent(__SLUG__);
      const pad = document.getElementById('pad');
      const ctx = pad.getContext('2d');
      let drawing = false;
      let hasInk = false;

      function showStep(step) {{
        document.querySelectorAll('[data-panel]').forEach((el) => {{
          el.classList.toggle('hidden', Number(el.dataset.panel) !== step);
        }});
        document.querySelectorAll('.step').forEach((el) => {{
          const id = Number(el.dataset.step);
          el.classList.toggle('active', id === step);
          el.classList.toggle('done', id < step);
        }});
      }}

      function point(event) {{
        const rect = pad.getBoundingClientRect();
        return [
          (event.clientX - rect.left) * (pad.width / rect.width),
          (event.clientY - rect.top) * (pad.height / rect.height)
        ];
      }}
      pad.addEventListener('pointerdown', (event) => {{
        drawing = true;
        ctx.beginPath();
        ctx.moveTo(...point(event));
      }});
      pad.addEventListener('pointermove', (event) => {{
        if (!drawing) return;
        ctx.lineTo(...point(event));
        ctx.stroke();
        hasInk = true;
        document.getElementById('sign').disabled = false;
      }});
      window.addEventListener('pointerup', () => {{ drawing = false; }});

      function clearPad() {{
        ctx.clearRect(0, 0, pad.width, pad.height);
        hasInk = false;
        document.getElementById('sign').disabled = true;
      }}

      async function submitSignature() {{
        if (!hasInk) return;
        const res = await fetch(`/api/portal/${{slug}}/signature`, {{
          method: 'POST',
          headers: {{ 'Content-Type': 'application/json' }},
          body: JSON.stringify({{ signatureData: pad.toDataURL() }})
        }});
        if (!res.ok) {{
          alert('Error saving signature. Please try again.');
          return;
        }}
        const data = await res.json();
        showStep(data.step);
      }}

      async function pay() {{
        const res = await fetch(`/api/portal/${{slug}}/checkout`, {{ method: 'POST' }});
        if (!res.ok) {{
          alert('Error creating payment. Please try again.');
          return;
        }}
        const data = await res.json();
        if (data.url) window.location.href = data.url;
      }}

      async function load() {{
        const res = await fetch(`/api/portal/${{slug}}`);
        const title = document.getElementById('title');
        if (!res.ok) {{
          title.textContent = 'Portal Not Found';
          return;
        }}
        const data = await res.json();
        title.textContent = data.project.project_name;
        document.querySelectorAll('[data-field]').forEach((el) => {{
          el.textContent = data.project[el.dataset.field];
        }});
        document.getElementById('portal').classList.remove('hidden');
        showStep(data.step);
      }}
      load();
    </script>
  </body>
</html>
"""

_SUCCESS_HTML = f"""<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>Payment Successful</title>
    {_STYLE}
  </head>
  <body>
    <main>
      <h1>Payment Successful! 🎉</h1>
      <p>Thank you for your payment. Your booking is now confirmed.</p>
      <p>You'll receive a confirmation email shortly with all the details.</p>
      <p>Session ID: __SESSION_ID__</p>
      <p><a href="/">Return Home</a></p>
    </main>
  </body>
</html>
"""
