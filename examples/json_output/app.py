"""Structured output -- emitting JSON from templates (extended mode).

With ``extended=True`` the environment understands four extra tags:

    {{@}}         key or index of the current iteration item
    {{$ name }}   value as compact JSON
    {{% name }}   value as pretty JSON
    -top-         the outermost context, as {{$ -top- }} or {{#-top-}}

Run:
    python app.py
"""

from whisker import Environment

env = Environment(extended=True)

context = {
    "users": [
        {"name": "ann", "admin": True},
        {"name": "bob", "admin": False},
    ],
    "settings": {"theme": "dark", "lang": "en"},
}

users = env.from_string("{{#users}}{{@}}: {{$ .}}\n{{/users}}")
users_output = users.render(context)

settings = env.from_string("{{#settings}}{{@}}={{.}}\n{{/settings}}")
settings_output = settings.render(context)

dump = env.from_string("{{% -top- }}")
dump_output = dump.render(context)


def main() -> None:
    print(users_output)
    print(settings_output)
    print(dump_output)


if __name__ == "__main__":
    main()
