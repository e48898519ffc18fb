from unittest import TestCase

from ..util import formatRemaining, intervalSummary


class FormatRemainingTests(TestCase):
    def test_padding(self) -> None:
        self.assertEqual(formatRemaining(0), "00:00")
        self.assertEqual(formatRemaining(5), "00:05")
        self.assertEqual(formatRemaining(65), "01:05")
        self.assertEqual(formatRemaining(25 * 60), "25:00")

    def test_noWrap(self) -> None:
        """
        An hour or more is still shown as minutes.
        """
        self.assertEqual(formatRemaining(3600), "60:00")
        self.assertEqual(formatRemaining(100 * 60 + 1), "100:01")


class IntervalSummaryTests(TestCase):
    def test_summaries(self) -> None:
        self.assertEqual(intervalSummary(0), "0 seconds")
        self.assertEqual(intervalSummary(1), "1 second")
        self.assertEqual(intervalSummary(25 * 60), "25 minutes")
        self.assertEqual(intervalSummary(61), "1 minute and 1 second")
        self.assertEqual(
            intervalSummary(2 * 3600 + 60 + 5),
            "2 hours, 1 minute and 5 seconds",
        )
