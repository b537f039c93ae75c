"""Template rendering utilities."""

import html

from unity_style_checker.checkers import ALL_CHECKERS

_BASE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>{title}</title>
  <style>
    body { font-family: system-ui, sans-serif; max-width: 42rem; margin: 2rem auto; padding: 0 1rem; }
    h1 { font-size: 1.25rem; font-weight: 600; }
    ul { list-style: none; padding: 0; }
    li { margin: 0.5rem 0; }
    a { color: #2563eb; text-decoration: none; }
    a:hover { text-decoration: underline; }
    pre { background: #f1f5f9; padding: 1rem; border-radius: 0.375rem; overflow-x: auto; font-size: 0.8125rem; }
    .meta { color: #64748b; font-size: 0.875rem; margin-top: 1.5rem; }
  </style>
</head>
<body>
{content}
</body>
</html>
"""

_TEMPLATES = {
    "root.html": """  <h1>{title}</h1>
  <p>Endpoints:</p>
  <ul>
    <li><a href="/docs">/docs</a> - Swagger UI</li>
    <li><a href="/health">/health</a> - Liveness</li>
    <li><a href="/check">/check</a> - Usage (POST)</li>
    <li>/check/batch - POST a list of absolute paths</li>
  </ul>
  <p>Rules:</p>
  <ul>
{rules}
  </ul>
""",
    "check.html": """  <h1>{title}</h1>
  <p>POST JSON to <code>/check</code> with inline code:</p>
  <pre>{{"code": "public class Player : MonoBehaviour {{ }}", "filename": "Player.cs"}}</pre>
  <p>or with a server-side file:</p>
  <pre>{{"file_path": "/abs/path/Assets/Scripts/Player.cs"}}</pre>
  <p>POST to <code>/check/batch</code> with <code>{{"paths": ["/abs/path/Assets"]}}</code> for folders.</p>
  <p class="meta">See <a href="/docs">/docs</a> for the response schema.</p>
""",
}


def _rules_list() -> str:
    esc = html.escape
    return "\n".join(
        f"    <li><strong>{esc(c.rule_id)}</strong> ({esc(c.default_severity.value)}): {esc(c.description)}</li>"
        for c in ALL_CHECKERS
    )


def render_template(template_name: str, **kwargs) -> str:
    """Render a template inside the base page."""
    kwargs.setdefault("rules", _rules_list())
    title = kwargs.get("title", "Unity Style Checker")
    content = _TEMPLATES[template_name].format(**kwargs)
    # plain replacement: the base page's CSS braces are not format fields
    return _BASE.replace("{title}", html.escape(title)).replace("{content}", content)
