"""Benchmark template sources, loaded through a DictLoader."""

from __future__ import annotations

MEDIUM_VARS = "\n".join(f"<dd>{{{{var_{i}}}}}</dd>" for i in range(80))

TEMPLATES: dict[str, str] = {
    "minimal": "Hello, {{name}}!",
    "medium": (
        "<h1>{{user.name}}</h1>\n"
        "{{#user.admin}}\n<p class=\"admin\">{{user.email}}</p>\n{{/user.admin}}\n"
        "<ul>\n"
        "{{#items}}\n"
        "  {{> item}}\n"
        "{{/items}}\n"
        "</ul>\n"
        "<nav>{{#categories}}<a>{{.}}</a>{{/categories}}</nav>\n"
        "<dl>\n" + MEDIUM_VARS + "\n</dl>\n"
    ),
    "item": "<li id=\"{{id}}\">{{name}}: {{price}}</li>\n",
    "large": (
        "<h1>{{title}}</h1>\n"
        "<table>\n"
        "{{#rows}}\n"
        "  <tr>\n"
        "    {{> row}}\n"
        "  </tr>\n"
        "{{/rows}}\n"
        "</table>\n"
    ),
    "row": (
        "<td>{{id}}</td><td>{{name}}</td>\n"
        "<td>{{stock.warehouse}}/{{stock.count}}</td>\n"
        "<td>{{#tags}}{{.}} {{/tags}}{{^tags}}-{{/tags}}</td>\n"
        "{{#discontinued}}\n<td class=\"gone\">discontinued</td>\n{{/discontinued}}\n"
    ),
    "json": "{{%-top-}}\n{{#rows}}{{@}}={{$stock}}\n{{/rows}}",
}
