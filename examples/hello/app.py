"""Hello World -- the simplest whisker example.

Compile a template from a string and render it with context variables.
No loader needed.

Run:
    python app.py
"""

from whisker import Environment

env = Environment()

# Compile from string
template = env.from_string("Hello, {{ name }}!")

# Render with context
output = template.render(name="World")


def main() -> None:
    print(output)
    print()

    # Multiple renders with different context
    for name in ["Whisker", "<Mustache>", "Python"]:
        print(template.render(name=name))


if __name__ == "__main__":
    main()
