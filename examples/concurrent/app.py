"""Concurrent rendering -- one template, eight threads.

Compiled templates are immutable. Each render builds its own RenderContext
and publishes it through a ContextVar, so simultaneous renders never see
each other's scope stack or indentation.

Run:
    python app.py
"""

from concurrent.futures import ThreadPoolExecutor

from whisker import Environment

env = Environment()

# Each thread renders the same template with a different context
TEMPLATE_SOURCE = """\
<article id="page-{{ page_id }}">
  <h1>{{ title }}</h1>
  <ul>
  {{#tags}}
    <li>{{.}}</li>
  {{/tags}}
  </ul>
</article>"""

template = env.from_string(TEMPLATE_SOURCE)

pages = [
    {"page_id": i, "title": f"Page {i}", "tags": [f"tag-{i}-a", f"tag-{i}-b", f"tag-{i}-c"]}
    for i in range(8)
]


def render_page(page: dict) -> str:
    """Render a single page -- called from a worker thread."""
    return template.render(page)


with ThreadPoolExecutor(max_workers=8) as pool:
    results = list(pool.map(render_page, pages))

output = "\n".join(results)


def main() -> None:
    print(f"Rendered {len(results)} pages across 8 threads:\n")
    for i, html in enumerate(results):
        print(f"--- Thread {i} ---")
        print(html)
        print()


if __name__ == "__main__":
    main()
