"""
Offline advisory provider.

Produces the generic feedback shown when no AI service is configured.
"""

from collections.abc import Sequence

from backtester.core.interfaces.data import AdvisoryFeedback, IAdvisoryProvider


class StaticAdvisoryProvider(IAdvisoryProvider):
    """Rule-of-thumb feedback that does not call any external service."""

    async def get_feedback(
        self, models: Sequence[str], training_period_years: int, stop_loss_percentage: float
    ) -> AdvisoryFeedback:
        suggested_period = (
            training_period_years - 1 if training_period_years > 3 else training_period_years + 2
        )
        optimizations = [
            f"For your selected symbols, a {suggested_period}-year training period might "
            "capture market cycles better.",
        ]
        if models:
            optimizations.append(
                f"Compare {', '.join(dict.fromkeys(models))} against a buy-and-hold "
                "baseline before trading live."
            )
        return AdvisoryFeedback(
            stop_loss_feedback=(
                f"A {stop_loss_percentage:g}% stop loss is a common starting point, but "
                "should be validated against the asset's volatility."
            ),
            optimizations=tuple(optimizations),
        )
