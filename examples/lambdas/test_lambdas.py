"""Tests for the lambdas example."""


class TestLambdasApp:
    """Verify section lambdas, stateful lambdas and escaping of lambda output."""

    def test_output(self, example_app) -> None:
        assert example_app.output == "<b>Hi Ann</b>, your tickets: 1 2 3"

    def test_counter_continues_across_renders(self, example_app) -> None:
        result = example_app.template.render(
            name="Bo", bold=example_app.bold, ticket=example_app.ticket
        )
        assert result == "<b>Hi Bo</b>, your tickets: 4 5 6"

    def test_escaped_and_raw_lambda_output(self, example_app) -> None:
        assert example_app.shout_output == "&lt;hey&gt; / <hey>"
