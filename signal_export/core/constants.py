"""Common constants shared across the signal export package."""

from __future__ import annotations

from decimal import Decimal

MARGIN_BUFFER = Decimal("0.995")
NUMERAI_MINIMUM_TARGETS = 10

COLLECTIVE2_URL = "https://api.collective2.com/world/apiv3/setDesiredPositions"
CRUNCHDAO_URL = "https://api.tournament.crunchdao.com"
NUMERAI_URL = "https://api-tournament.numer.ai"

DEFAULT_REQUEST_TIMEOUT_SECONDS = 10.0
DEFAULT_NUMERAI_FILENAME = "predictions.csv"
CRUNCHDAO_FILENAME = "submission.csv"
