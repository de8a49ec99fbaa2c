"""
HTML for the settings view.
"""

from __future__ import annotations

import json
from html import escape

from ..config import RunConfig
from .bridge import SETTINGS_ENDPOINT


BASE_CSS = """
  * { margin: 0; padding: 0; box-sizing: border-box; }
  body { font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif; background: #f5f5f5; color: #333; padding: 2rem; }
  h1 { font-size: 1.5rem; margin-bottom: .25rem; }
  .primary { background: #ff6600; color: #fff; border: none; padding: .6rem 1.5rem; border-radius: 8px; font-size: .9rem; font-weight: 600; cursor: pointer; }
  .primary:hover { background: #e55b00; }
  .primary:disabled { background: #ccc; cursor: not-allowed; }
"""

SETTINGS_CSS = """
  .container { max-width: 720px; margin: 0 auto; }
  .subtitle { color: #888; font-size: .85rem; margin-bottom: 1.5rem; }
  .fields { display: grid; grid-template-columns: 1fr 1fr; gap: 1rem; margin-bottom: 1.5rem; }
  .field { background: #fff; border-radius: 8px; padding: 1rem; box-shadow: 0 1px 3px rgba(0,0,0,.1); }
  .field.full { grid-column: 1 / -1; }
  .field label { display: block; font-size: .7rem; text-transform: uppercase; letter-spacing: .05em; color: #888; margin-bottom: .4rem; font-weight: 600; }
  .field input { width: 100%; padding: .5rem .625rem; border: 1px solid #ddd; border-radius: 6px; font-size: .9rem; }
  .field .hint { font-size: .7rem; color: #aaa; margin-top: .3rem; }
  .actions { display: flex; gap: .75rem; align-items: center; }
  #reset-btn { background: none; border: 1px solid #ddd; padding: .55rem 1.25rem; border-radius: 8px; font-size: .85rem; cursor: pointer; color: #666; }
  #status { font-size: .8rem; color: #888; margin-left: auto; }
  #errors { color: #dc2626; font-size: .8rem; margin-top: 1rem; list-style: none; }
"""

# (wire key, label, input type, extra attributes, hint, full width)
FIELDS = [
    ("targetCount", "Target Items", "number", 'min="1" max="500"', "Number of items to validate", False),
    ("maxRetries", "Max Retries", "number", 'min="0" max="10"', "Attempts per page navigation", False),
    ("retryDelayMs", "Retry Delay (ms)", "number", 'min="0" max="30000" step="500"', "Wait time between retries", False),
    ("navigationTimeoutMs", "Navigation Timeout (ms)", "number", 'min="1000" max="60000" step="1000"', "Max wait for a page to load", False),
    ("sourceUrl", "Listing URL", "text", "", "The listing page to check, e.g. another HN view", True),
    ("reportPath", "Report Output Path", "text", "", "Where to save the HTML report on disk", True),
]

INT_FIELDS = [key for key, _, kind, _, _, _ in FIELDS if kind == "number"]


def _script_json(value: object) -> str:
    # Safe to embed inside a <script> element
    return json.dumps(value).replace("</", "<\\/")


def render_settings_html(config: RunConfig, defaults: RunConfig, title: str = "Hacker News Sort Validator") -> str:
    values = config.to_wire()
    fields_html = ""
    for key, label, kind, attrs, hint, full in FIELDS:
        fields_html += f"""
      <div class="field{' full' if full else ''}">
        <label for="{key}">{escape(label)}</label>
        <input type="{kind}" id="{key}" value="{escape(str(values[key]))}" {attrs}>
        <div class="hint">{escape(hint)}</div>
      </div>"""

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<title>{escape(title)} - Settings</title>
<style>{BASE_CSS}{SETTINGS_CSS}</style>
</head>
<body>
  <div class="container">
    <h1>{escape(title)}</h1>
    <p class="subtitle">Configure the validation parameters below, then hit Run.</p>
    <div class="fields">{fields_html}
    </div>
    <div class="actions">
      <button id="run-btn" class="primary">Run Validation</button>
      <button id="reset-btn">Reset Defaults</button>
      <span id="status"></span>
    </div>
    <ul id="errors"></ul>
  </div>
  <script>
    const defaults = {_script_json(defaults.to_wire())};
    const intFields = {_script_json(INT_FIELDS)};

    document.getElementById("reset-btn").addEventListener("click", () => {{
      for (const [key, value] of Object.entries(defaults)) {{
        document.getElementById(key).value = value;
      }}
    }});

    document.getElementById("run-btn").addEventListener("click", async () => {{
      const btn = document.getElementById("run-btn");
      const status = document.getElementById("status");
      const errors = document.getElementById("errors");
      btn.disabled = true;
      errors.innerHTML = "";
      status.textContent = "Starting validation...";

      const settings = {{}};
      for (const key of Object.keys(defaults)) {{
        const raw = document.getElementById(key).value.trim();
        settings[key] = intFields.includes(key) ? parseInt(raw, 10) : raw;
      }}

      const reply = await window.{SETTINGS_ENDPOINT}(JSON.stringify(settings));
      if (reply && reply.ok === false) {{
        for (const message of reply.errors || []) {{
          const li = document.createElement("li");
          li.textContent = message;
          errors.appendChild(li);
        }}
        status.textContent = "";
        btn.disabled = false;
      }}
    }});
  </script>
</body>
</html>"""
