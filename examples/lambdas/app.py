"""Lambdas -- Python callables that rewrite template text.

A callable in the context becomes a lambda. Used as a section it receives
the unrendered section body; used as a tag it receives an empty string.
Whatever it returns is compiled and rendered in place, so the returned
text may contain tags of its own.

Run:
    python app.py
"""

import itertools

from whisker import Environment

env = Environment()


def bold(text: str) -> str:
    return f"<b>{text}</b>"


_counter = itertools.count(1)


def ticket(_: str) -> str:
    """Stateful lambda: every occurrence gets the next number."""
    return str(next(_counter))


template = env.from_string("{{#bold}}Hi {{name}}{{/bold}}, your tickets: {{ticket}} {{ticket}} {{ticket}}")

output = template.render(name="Ann", bold=bold, ticket=ticket)

shout = env.from_string("{{ shout }} / {{{ shout }}}")

shout_output = shout.render(shout=lambda _: "<{{word}}>", word="hey")


def main() -> None:
    print(output)
    print(shout_output)


if __name__ == "__main__":
    main()
