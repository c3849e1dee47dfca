import logging

import gradio as gr
import pandas as pd

from components.api_client import TaxApiClient
from components.charts import generate_time_to_target_chart
from components.formatting import (
    error_html,
    format_currency,
    format_months,
    info_html,
    result_card,
    target_date,
    whole_months,
)
from components.validation import InputError, lakhs_suffix, parse_amount, parse_percentage

logger = logging.getLogger(__name__)

EXPENSE_PERIODS = ["Monthly", "Annual"]
TAKE_HOME_PERIODS = ["Yearly", "Monthly"]

RANGE_COLUMNS = ["Annual CTC", "Monthly Savings"]
TARGET_COLUMNS = ["Annual CTC", "Months to Target", "Duration", "Target Date"]

FETCH_FAILED = "Failed to fetch calculation results."

tax_api = TaxApiClient()


def busy_button(label):
    """Disable a trigger button while its request is in flight"""
    return gr.update(value=label, interactive=False)


def ready_button(label):
    return gr.update(value=label, interactive=True)


def _failure(e, fallback=FETCH_FAILED):
    return error_html(str(e) or fallback)


# ========== TAKE HOME ==========
def handle_take_home(annual_ctc, in_lakhs=False):
    """Yearly/monthly take-home and tax for one CTC"""
    try:
        ctc = parse_amount(
            annual_ctc,
            f"Please enter a valid positive number for Annual CTC{lakhs_suffix(in_lakhs)}.",
            in_lakhs=in_lakhs,
        )
        result = tax_api.calculate_take_home(ctc)

        card = result_card("Results:", [
            ("Yearly Take Home", format_currency(result.yearly_take_home)),
            ("Monthly Take Home", format_currency(result.monthly_take_home)),
            None,
            ("Yearly Tax Payable", format_currency(result.yearly_tax_payable)),
            ("Monthly Tax Payable", format_currency(result.monthly_tax_payable)),
        ])
        return "", card

    except InputError as e:
        return error_html(str(e)), ""
    except Exception as e:
        logger.error(f"Take home calculation error: {e}")
        return _failure(e), ""


# ========== SAVINGS ==========
def handle_savings(annual_ctc, expense_period="Monthly", expense_value=None, in_lakhs=False):
    """Savings for one CTC with an optional monthly or annual expense"""
    try:
        suffix = lakhs_suffix(in_lakhs)
        ctc = parse_amount(
            annual_ctc,
            f"Please enter a valid positive number for Annual CTC{suffix}.",
            in_lakhs=in_lakhs,
        )
        expense = parse_amount(
            expense_value,
            f"Please enter a valid positive number for Expense{suffix}, or leave blank.",
            in_lakhs=in_lakhs,
            optional=True,
        )

        if expense_period == "Annual":
            result = tax_api.calculate_savings(ctc, annual_expenses=expense)
        else:
            result = tax_api.calculate_savings(ctc, monthly_expense=expense)

        card = result_card(
            "Results:",
            [
                ("Yearly Savings", format_currency(result.yearly_savings)),
                ("Monthly Savings", format_currency(result.monthly_savings)),
            ],
            footnote=f"(Based on Monthly Take Home: {format_currency(result.monthly_take_home)})",
        )
        return "", card

    except InputError as e:
        return error_html(str(e)), ""
    except Exception as e:
        logger.error(f"Savings calculation error: {e}")
        return _failure(e), ""


# ========== SAVINGS RANGE ==========
def _empty_range_table():
    return pd.DataFrame(columns=RANGE_COLUMNS)


def handle_savings_range(min_ctc, min_in_lakhs, max_ctc, max_in_lakhs, monthly_expense, expense_in_lakhs):
    """Monthly savings for each CTC step between min and max"""
    try:
        low = parse_amount(
            min_ctc,
            f"Please enter a valid positive number for Minimum CTC{lakhs_suffix(min_in_lakhs)}.",
            in_lakhs=min_in_lakhs,
        )
        high = parse_amount(
            max_ctc,
            f"Please enter a valid positive number for Maximum CTC{lakhs_suffix(max_in_lakhs)}.",
            in_lakhs=max_in_lakhs,
        )
        expense = parse_amount(
            monthly_expense,
            f"Please enter a valid positive number for Monthly Expense{lakhs_suffix(expense_in_lakhs)}.",
            in_lakhs=expense_in_lakhs,
        )
        if low > high:
            raise InputError("Minimum CTC cannot be greater than Maximum CTC.")

        results = tax_api.calculate_savings_range(low, high, expense)
        if not results:
            return info_html("No results received from server."), _empty_range_table()

        table = pd.DataFrame(
            [[format_currency(item.annual_ctc), format_currency(item.monthly_savings)] for item in results],
            columns=RANGE_COLUMNS,
        )
        return "", table

    except InputError as e:
        return error_html(str(e)), _empty_range_table()
    except Exception as e:
        logger.error(f"Savings range calculation error: {e}")
        return _failure(e, "Failed to fetch range results."), _empty_range_table()


# ========== TIME TO TARGET ==========
def _empty_target_table():
    return pd.DataFrame(columns=TARGET_COLUMNS)


def _target_table(items):
    rows = []
    for item in items:
        months = item.time_to_target_months
        reached = target_date(months)
        rows.append([
            format_currency(item.annual_ctc, decimals=0),
            whole_months(months) if months is not None else "—",
            format_months(months),
            reached.strftime("%b %Y") if reached else "—",
        ])
    return pd.DataFrame(rows, columns=TARGET_COLUMNS)


def handle_time_to_target(min_ctc, max_ctc, monthly_expense, target_amount, increment,
                          current_investments=None, lumpsum_expenses=None,
                          monthly_sip_amount=None, sip_cagr=None, in_lakhs=False):
    """Months needed to save target_amount for each CTC step in a range"""
    try:
        suffix = lakhs_suffix(in_lakhs)
        low = parse_amount(min_ctc, f"Invalid Min CTC{suffix}", in_lakhs=in_lakhs)
        high = parse_amount(max_ctc, f"Invalid Max CTC{suffix}", in_lakhs=in_lakhs)
        expense = parse_amount(monthly_expense, f"Invalid Monthly Expense{suffix}", in_lakhs=in_lakhs)
        target = parse_amount(target_amount, f"Invalid Target Amount{suffix}", in_lakhs=in_lakhs, allow_zero=False)
        step = parse_amount(increment, "Invalid Increment (must be positive)", in_lakhs=in_lakhs, allow_zero=False)
        investments = parse_amount(
            current_investments, f"Invalid Current Investments{suffix}", in_lakhs=in_lakhs, optional=True
        )
        lumpsum = parse_amount(
            lumpsum_expenses, f"Invalid Lumpsum Expenses{suffix}", in_lakhs=in_lakhs, optional=True
        )
        sip = parse_amount(
            monthly_sip_amount, f"Invalid Monthly SIP Amount{suffix}", in_lakhs=in_lakhs, optional=True
        )
        cagr = parse_percentage(sip_cagr, "Invalid SIP CAGR (%)")
        if low > high:
            raise InputError("Min CTC > Max CTC")

        items = tax_api.calculate_time_to_target(
            low, high, expense, target, step,
            current_investments=investments,
            lumpsum_expenses=lumpsum,
            monthly_sip_amount=sip,
            sip_cagr=cagr,
        )

        if not items:
            return error_html("No results received from server."), None, _empty_target_table()

        table = _target_table(items)
        fig = generate_time_to_target_chart(items)
        if fig is None:
            return (
                error_html("Target amount is not reachable with the given expenses for any CTC in the range."),
                None,
                table,
            )
        return "", fig, table

    except InputError as e:
        return error_html(str(e)), None, _empty_target_table()
    except Exception as e:
        logger.error(f"Time to target calculation error: {e}")
        return _failure(e, "Failed to fetch time to target data."), None, _empty_target_table()


# ========== REVERSE CTC ==========
def handle_reverse_ctc(desired_take_home, period="Yearly", in_lakhs=False):
    """Estimate the CTC needed for a desired yearly or monthly take-home"""
    try:
        amount = parse_amount(
            desired_take_home,
            f"Please enter a valid positive desired {period.lower()} take-home amount{lakhs_suffix(in_lakhs)}.",
            in_lakhs=in_lakhs,
            allow_zero=False,
        )
        yearly_take_home = amount * 12 if period == "Monthly" else amount

        result = tax_api.calculate_ctc(yearly_take_home)

        status = info_html(result.message) if result.message else ""
        card = result_card(
            "Result:",
            [("Estimated Required Annual CTC", format_currency(result.required_annual_ctc, decimals=0))],
            footnote="(This is an estimate based on the current tax rules and may vary.)",
        )
        return status, card

    except InputError as e:
        return error_html(str(e)), ""
    except Exception as e:
        logger.error(f"Reverse CTC calculation error: {e}")
        return _failure(e, "Failed to calculate CTC."), ""
