"""Partials -- reusable fragments loaded from an in-memory DictLoader.

A partial tag alone on its line is indented as a whole: every line the
partial produces gets the whitespace that preceded the tag.

Run:
    python app.py
"""

from whisker import DictLoader, Environment

loader = DictLoader(
    {
        "page": (
            "<html>\n"
            "  <body>\n"
            "    {{> nav}}\n"
            "  </body>\n"
            "</html>"
        ),
        "nav": (
            "<nav>\n"
            "{{#links}}\n"
            '  <a href="{{href}}">{{label}}</a>\n'
            "{{/links}}\n"
            "</nav>\n"
        ),
    }
)

env = Environment(loader=loader)

template = env.get_template("page")

links = [
    {"href": "/", "label": "Home"},
    {"href": "/about", "label": "About"},
]

output = template.render(links=links)


def main() -> None:
    print(output)


if __name__ == "__main__":
    main()
