"""
Tests for the calculation service client: request shapes, DTO parsing and
error message extraction.
"""

import threading

import pytest
import requests

from components.api_client import (
    CtcResult,
    RangeSavingsItem,
    TakeHomeResult,
    TaxApiClient,
    TaxApiError,
    TimeToTargetItem,
)
from conftest import BASE_URL, FakeSession


class TestRequests:

    def test_take_home_posts_annual_ctc(self, api_client, fake_session, make_response):
        fake_session.response = make_response(body={
            "yearlyTakeHome": 1100000,
            "monthlyTakeHome": 91666.67,
            "yearlyTaxPayable": 100000,
            "monthlyTaxPayable": 8333.33,
        })

        result = api_client.calculate_take_home(1200000)

        call = fake_session.calls[0]
        assert call["url"] == f"{BASE_URL}/api/v1/tax/calculate-take-home"
        assert call["json"] == {"annualCtc": 1200000}
        assert result == TakeHomeResult(1100000, 91666.67, 100000, 8333.33)

    def test_savings_omits_missing_expenses(self, api_client, fake_session, make_response):
        fake_session.response = make_response(body={"yearlySavings": 1, "monthlySavings": 2})

        result = api_client.calculate_savings(1500000)

        assert fake_session.last_payload == {"annualCtc": 1500000}
        assert result.yearly_savings == 1
        assert result.monthly_take_home == 0

    def test_savings_sends_chosen_expense_key(self, api_client, fake_session, make_response):
        fake_session.response = make_response(body={})

        api_client.calculate_savings(1500000, annual_expenses=480000)
        assert fake_session.last_payload == {"annualCtc": 1500000, "annualExpenses": 480000}

        api_client.calculate_savings(1500000, monthly_expense=40000)
        assert fake_session.last_payload == {"annualCtc": 1500000, "monthlyExpense": 40000}

    def test_savings_range_parses_results(self, api_client, fake_session, make_response):
        fake_session.response = make_response(body={"results": [
            {"annualCtc": 1000000, "monthlySavings": 35000},
            {"annualCtc": 1500000, "monthlySavings": 70000},
        ]})

        items = api_client.calculate_savings_range(1000000, 1500000, 40000)

        assert fake_session.calls[0]["url"].endswith("/calculate-savings-range")
        assert fake_session.last_payload == {"minCtc": 1000000, "maxCtc": 1500000, "monthlyExpense": 40000}
        assert items == [RangeSavingsItem(1000000, 35000), RangeSavingsItem(1500000, 70000)]

    def test_savings_range_missing_results_is_empty(self, api_client, fake_session, make_response):
        fake_session.response = make_response(body={})
        assert api_client.calculate_savings_range(1, 2, 0) == []

    def test_time_to_target_optional_fields(self, api_client, fake_session, make_response):
        fake_session.response = make_response(body={"results": [
            {"annualCtc": 1000000, "timeToTargetMonths": None},
            {"annualCtc": 1500000, "timeToTargetMonths": 42},
        ]})

        items = api_client.calculate_time_to_target(
            1000000, 1500000, 40000, 5000000, 500000,
            current_investments=200000, sip_cagr=12,
        )

        assert fake_session.last_payload == {
            "minCtc": 1000000,
            "maxCtc": 1500000,
            "monthlyExpense": 40000,
            "targetAmount": 5000000,
            "increment": 500000,
            "currentInvestments": 200000,
            "sipCagr": 12,
        }
        assert items == [TimeToTargetItem(1000000, None), TimeToTargetItem(1500000, 42.0)]
        assert not items[0].reachable
        assert items[1].reachable

    def test_calculate_ctc(self, api_client, fake_session, make_response):
        fake_session.response = make_response(body={"requiredAnnualCtc": 1725000, "message": "Closest estimate"})

        result = api_client.calculate_ctc(1500000)

        assert fake_session.calls[0]["url"].endswith("/calculate-ctc")
        assert fake_session.last_payload == {"desiredYearlyTakeHome": 1500000}
        assert result == CtcResult(1725000, "Closest estimate")

    def test_trailing_slash_trimmed_and_json_header(self, make_response):
        session = FakeSession(response=make_response(body={"requiredAnnualCtc": 1}))
        client = TaxApiClient(base_url="http://host:8080/", timeout=5, session=session)

        client.calculate_ctc(10)

        assert session.calls[0]["url"] == "http://host:8080/api/v1/tax/calculate-ctc"
        assert session.calls[0]["timeout"] == 5
        assert session.headers["Content-Type"] == "application/json"


class TestErrors:

    def test_server_message_used_verbatim(self, api_client, fake_session, make_response):
        fake_session.response = make_response(
            status=400, reason="Bad Request",
            body={"requiredAnnualCtc": 0, "message": "Desired yearly take-home must be positive."},
        )

        with pytest.raises(TaxApiError) as exc:
            api_client.calculate_ctc(0)

        assert exc.value.message == "Desired yearly take-home must be positive."
        assert exc.value.status_code == 400

    def test_detail_preferred_over_message(self, api_client, fake_session, make_response):
        fake_session.response = make_response(
            status=422, reason="Unprocessable Entity", body={"detail": "Bad range", "message": "ignored"},
        )

        with pytest.raises(TaxApiError, match="^Bad range$"):
            api_client.calculate_savings_range(2, 1, 0)

    def test_structured_detail_skipped_for_message(self, api_client, fake_session, make_response):
        fake_session.response = make_response(
            status=422, reason="Unprocessable Entity",
            body={"detail": [{"loc": ["body"], "msg": "bad"}], "message": "Invalid request body"},
        )

        with pytest.raises(TaxApiError, match="^Invalid request body$"):
            api_client.calculate_take_home(1)

    def test_structured_detail_falls_back_to_status_line(self, api_client, fake_session, make_response):
        fake_session.response = make_response(
            status=422, reason="Unprocessable Entity", body={"detail": [{"loc": ["body"], "msg": "bad"}]},
        )

        with pytest.raises(TaxApiError, match="^Error: 422 Unprocessable Entity$"):
            api_client.calculate_take_home(1)

    def test_non_json_body_falls_back_to_status_line(self, api_client, fake_session, make_response):
        fake_session.response = make_response(status=502, reason="Bad Gateway", text="<html>oops</html>")

        with pytest.raises(TaxApiError) as exc:
            api_client.calculate_take_home(1)

        assert exc.value.message == "Error: 502 Bad Gateway"

    def test_empty_error_body_falls_back_to_status_line(self, api_client, fake_session, make_response):
        fake_session.response = make_response(status=400, reason="Bad Request")

        with pytest.raises(TaxApiError, match="^Error: 400 Bad Request$"):
            api_client.calculate_take_home(-1)

    def test_transport_failure(self, api_client, fake_session):
        fake_session.error = requests.ConnectionError("Connection refused")

        with pytest.raises(TaxApiError) as exc:
            api_client.calculate_take_home(1)

        assert "Connection refused" in exc.value.message
        assert exc.value.status_code is None

    def test_non_json_success_body(self, api_client, fake_session, make_response):
        fake_session.response = make_response(status=200, text="not json")

        with pytest.raises(TaxApiError, match="Unexpected response"):
            api_client.calculate_take_home(1)


class TestSessions:

    def test_each_thread_gets_its_own_session(self):
        client = TaxApiClient(base_url=BASE_URL)
        sessions = {}

        def grab(name):
            sessions[name] = client.session

        workers = [threading.Thread(target=grab, args=(name,)) for name in ("a", "b")]
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join()

        assert sessions["a"] is not sessions["b"]
        assert isinstance(sessions["a"], requests.Session)
        assert sessions["a"].headers["Content-Type"] == "application/json"

    def test_same_thread_reuses_session(self):
        client = TaxApiClient(base_url=BASE_URL)

        assert client.session is client.session

    def test_injected_session_is_shared(self, api_client, fake_session):
        assert api_client.session is fake_session
