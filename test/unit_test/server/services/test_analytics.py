"""
Unit tests for analytics helpers.
"""

import pytest

from neurmatic.server.services.analytics import conversion_rate


class TestConversionRate:
    def test_no_applications(self):
        assert conversion_rate({}) == 0.0

    def test_only_offers_and_acceptances_count(self):
        by_status = {"pending": 5, "rejected": 2, "offered": 2, "accepted": 1}
        assert conversion_rate(by_status) == pytest.approx(0.3)

    def test_rounded_to_four_places(self):
        assert conversion_rate({"pending": 2, "offered": 1}) == 0.3333
