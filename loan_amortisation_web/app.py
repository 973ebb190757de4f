import logging
import os
from typing import Any, Dict, Mapping, Optional

from flask import Flask, jsonify, request

from loan_amortisation.data_models import InterestMethod, InterestType, LoanTerms
from loan_amortisation.engine import compute_schedule
from loan_amortisation.errors import CalculationError, InputParseError, InvalidLoanTermsError
from loan_amortisation.utils import decimal_from_str, optional_decimal, parse_date, percent_to_fraction

REQUIRED_FIELDS = (
    "principal",
    "annual_rate",
    "num_payments",
    "disbursal_date",
    "first_payment_date",
    "first_capitalisation_date",
)


def _payload_to_terms(payload: Mapping[str, Any]) -> LoanTerms:
    """Build ``LoanTerms`` from a JSON body; ``annual_rate`` is in percent."""
    missing = [name for name in REQUIRED_FIELDS if payload.get(name) in (None, "")]
    if missing:
        raise InputParseError(f"Missing required field(s): {', '.join(missing)}")
    try:
        num_payments = int(payload["num_payments"])
    except (TypeError, ValueError) as exc:
        raise InputParseError(f"Invalid number of payments: {payload['num_payments']}") from exc

    def _optional(name: str):
        value = payload.get(name)
        return None if value is None else optional_decimal(str(value))

    return LoanTerms(
        principal=decimal_from_str(str(payload["principal"])),
        annual_rate=percent_to_fraction(decimal_from_str(str(payload["annual_rate"]))),
        num_payments=num_payments,
        disbursal_date=parse_date(str(payload["disbursal_date"])),
        first_payment_date=parse_date(str(payload["first_payment_date"])),
        first_capitalisation_date=parse_date(str(payload["first_capitalisation_date"])),
        interest_method=InterestMethod.from_str(
            str(payload.get("interest_method", InterestMethod.ActualActual.name))
        ),
        interest_type=InterestType.from_str(
            str(payload.get("interest_type", InterestType.Simple.name))
        ),
        fixed_payment=_optional("fixed_payment"),
        balloon_payment=_optional("balloon_payment"),
        option_fee=_optional("option_fee"),
    )


def _error(message: str, status: int):
    return jsonify({"error": message}), status


def create_app(config: Optional[Dict[str, Any]] = None) -> Flask:
    app = Flask(__name__)
    app.config["LOG_LEVEL"] = os.environ.get("LOAN_AMORTISE_LOG_LEVEL", "WARNING")
    if config:
        app.config.update(config)
    app.logger.setLevel(getattr(logging, str(app.config["LOG_LEVEL"]).upper(), logging.WARNING))

    @app.get("/api/health")
    def health():
        return jsonify({"status": "ok"})

    @app.post("/api/amortise")
    def amortise_endpoint():
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            return _error("Request body must be a JSON object", 400)
        try:
            terms = _payload_to_terms(payload)
            result = compute_schedule(terms)
        except (InputParseError, InvalidLoanTermsError) as exc:
            return _error(str(exc), 400)
        except CalculationError as exc:
            app.logger.error("amortisation failed: %s", exc)
            return _error(str(exc), 500)
        if not result.converged:
            app.logger.warning("payment solver did not converge for %s", payload)
            return _error("payment solver did not converge", 422)
        return jsonify(result.to_dict())

    return app


app = create_app()


if __name__ == "__main__":
    print("Starting loan amortisation API...")
    app.run(port=int(os.environ.get("PORT", "8710")))
