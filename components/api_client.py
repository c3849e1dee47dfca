"""
Tax calculation service client
==============================

HTTP client for the external calculation service. Every figure shown in the
UI comes from here; nothing is computed locally. One POST per call, JSON in
and out, no retries.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from components import config

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1/tax"
JSON_HEADERS = {"Content-Type": "application/json"}


class TaxApiError(Exception):
    """Raised when the calculation service cannot produce a result"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _number(payload: Dict[str, Any], key: str) -> float:
    value = payload.get(key)
    return float(value) if value is not None else 0.0


@dataclass
class TakeHomeResult:
    yearly_take_home: float
    monthly_take_home: float
    yearly_tax_payable: float
    monthly_tax_payable: float

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "TakeHomeResult":
        return cls(
            yearly_take_home=_number(payload, "yearlyTakeHome"),
            monthly_take_home=_number(payload, "monthlyTakeHome"),
            yearly_tax_payable=_number(payload, "yearlyTaxPayable"),
            monthly_tax_payable=_number(payload, "monthlyTaxPayable"),
        )


@dataclass
class SavingsResult:
    yearly_savings: float
    monthly_savings: float
    yearly_take_home: float
    monthly_take_home: float

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "SavingsResult":
        return cls(
            yearly_savings=_number(payload, "yearlySavings"),
            monthly_savings=_number(payload, "monthlySavings"),
            yearly_take_home=_number(payload, "yearlyTakeHome"),
            monthly_take_home=_number(payload, "monthlyTakeHome"),
        )


@dataclass
class RangeSavingsItem:
    annual_ctc: float
    monthly_savings: float

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "RangeSavingsItem":
        return cls(
            annual_ctc=_number(payload, "annualCtc"),
            monthly_savings=_number(payload, "monthlySavings"),
        )


@dataclass
class TimeToTargetItem:
    annual_ctc: float
    time_to_target_months: Optional[float]  # None when the target is unreachable

    @property
    def reachable(self) -> bool:
        return self.time_to_target_months is not None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "TimeToTargetItem":
        months = payload.get("timeToTargetMonths")
        return cls(
            annual_ctc=_number(payload, "annualCtc"),
            time_to_target_months=float(months) if months is not None else None,
        )


@dataclass
class CtcResult:
    required_annual_ctc: float
    message: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "CtcResult":
        return cls(
            required_annual_ctc=_number(payload, "requiredAnnualCtc"),
            message=payload.get("message") or None,
        )


def _error_message(response: requests.Response) -> str:
    """Best message for a non-2xx response: detail, then message, then status line"""
    message = f"Error: {response.status_code} {response.reason or ''}".strip()
    try:
        body = response.json()
    except ValueError:
        return message

    if isinstance(body, dict):
        for key in ("detail", "message"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value
    return message


class TaxApiClient:
    """Client for the tax calculation service."""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        """Initialize the client.

        Args:
            base_url: Service root (defaults to TAX_API_BASE_URL)
            timeout: Request timeout in seconds (defaults to TAX_API_TIMEOUT, None waits indefinitely)
            session: Pre-built session shared by all callers, mainly for tests.
                When omitted each worker thread gets its own session.
        """
        self.base_url = (base_url or config.TAX_API_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else config.TAX_API_TIMEOUT
        self._session = session
        self._local = threading.local()
        if session is not None:
            session.headers.update(JSON_HEADERS)

        logger.info(f"Tax API client initialized: base_url={self.base_url}, timeout={self.timeout}")

    @property
    def session(self) -> requests.Session:
        """Session for the calling thread; requests.Session is not thread-safe"""
        if self._session is not None:
            return self._session

        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            session.headers.update(JSON_HEADERS)
            self._local.session = session
        return session

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}{API_PREFIX}/{endpoint}"

    def _post(self, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = self._url(endpoint)
        logger.debug(f"POST {url} {payload}")

        try:
            response = self.session.post(url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"❌ Calculation service unreachable ({endpoint}): {e}")
            raise TaxApiError(str(e) or "Failed to reach the calculation service.") from e

        if not response.ok:
            message = _error_message(response)
            logger.warning(f"Calculation service returned {response.status_code} for {endpoint}: {message}")
            raise TaxApiError(message, response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"❌ Non-JSON response from {endpoint}: {e}")
            raise TaxApiError("Unexpected response from calculation service.", response.status_code) from e

        if not isinstance(data, dict):
            raise TaxApiError("Unexpected response from calculation service.", response.status_code)
        return data

    def calculate_take_home(self, annual_ctc: float) -> TakeHomeResult:
        data = self._post("calculate-take-home", {"annualCtc": annual_ctc})
        return TakeHomeResult.from_payload(data)

    def calculate_savings(self, annual_ctc: float, annual_expenses: Optional[float] = None,
                          monthly_expense: Optional[float] = None) -> SavingsResult:
        payload: Dict[str, Any] = {"annualCtc": annual_ctc}
        if annual_expenses is not None:
            payload["annualExpenses"] = annual_expenses
        if monthly_expense is not None:
            payload["monthlyExpense"] = monthly_expense

        data = self._post("calculate-savings", payload)
        return SavingsResult.from_payload(data)

    def calculate_savings_range(self, min_ctc: float, max_ctc: float,
                                monthly_expense: float) -> List[RangeSavingsItem]:
        data = self._post("calculate-savings-range", {
            "minCtc": min_ctc,
            "maxCtc": max_ctc,
            "monthlyExpense": monthly_expense,
        })
        return [RangeSavingsItem.from_payload(item) for item in data.get("results") or []]

    def calculate_time_to_target(
        self,
        min_ctc: float,
        max_ctc: float,
        monthly_expense: float,
        target_amount: float,
        increment: float,
        current_investments: Optional[float] = None,
        lumpsum_expenses: Optional[float] = None,
        monthly_sip_amount: Optional[float] = None,
        sip_cagr: Optional[float] = None,
    ) -> List[TimeToTargetItem]:
        payload: Dict[str, Any] = {
            "minCtc": min_ctc,
            "maxCtc": max_ctc,
            "monthlyExpense": monthly_expense,
            "targetAmount": target_amount,
            "increment": increment,
        }
        optional = {
            "currentInvestments": current_investments,
            "lumpsumExpenses": lumpsum_expenses,
            "monthlySipAmount": monthly_sip_amount,
            "sipCagr": sip_cagr,
        }
        payload.update({key: value for key, value in optional.items() if value is not None})

        data = self._post("calculate-time-to-target", payload)
        return [TimeToTargetItem.from_payload(item) for item in data.get("results") or []]

    def calculate_ctc(self, desired_yearly_take_home: float) -> CtcResult:
        data = self._post("calculate-ctc", {"desiredYearlyTakeHome": desired_yearly_take_home})
        return CtcResult.from_payload(data)
