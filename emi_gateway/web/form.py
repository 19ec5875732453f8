"""Server-rendered EMI form with real-time validation"""

from html import escape
from typing import Dict, List, Mapping, Optional

from emi_gateway.domain.formatting import format_currency
from emi_gateway.domain.models import CalculationResult

DEFAULT_VALUES = {
    "principal": "100000",
    "monthly_rate": "1",
    "months": "12",
}

FORM_FIELDS = [
    # (name, label, min, max, step)
    ("principal", "Principal Amount", "1", "10000000", "any"),
    ("monthly_rate", "Monthly Interest Rate (%)", "0.1", "100", "any"),
    ("months", "Loan Tenure (Months)", "1", "360", "1"),
]


def _render_field(name: str, label: str, minimum: str, maximum: str, step: str, value: str, errors: List[str]) -> str:
    message = " ".join(errors)
    invalid = ' aria-invalid="true"' if errors else ""
    return f"""
      <div class="field">
        <label for="{name}">{escape(label)}</label>
        <input id="{name}" name="{name}" type="number" min="{minimum}" max="{maximum}" step="{step}"
               value="{escape(value)}"{invalid} aria-describedby="{name}-error">
        <span class="field-error" id="{name}-error" role="alert">{escape(message)}</span>
      </div>"""


def _render_result(result: Optional[CalculationResult], currency_symbol: str) -> str:
    if result is None:
        return '<section id="result" class="result" hidden></section>'

    return f"""<section id="result" class="result">
      <h2>Calculation Results ({escape(result.currency)})</h2>
      <p>Monthly EMI: <strong id="monthly-payment">{escape(result.formatted_monthly_payment)}</strong></p>
      <p>Total Amount: <span id="total-payment">{escape(format_currency(result.total_payment, currency_symbol))}</span></p>
      <p>Total Interest: <span id="total-interest">{escape(format_currency(result.total_interest, currency_symbol))}</span></p>
    </section>"""


SCRIPT = """
<script>
(function () {
  const form = document.getElementById("emi-form");
  const fields = ["principal", "monthly_rate", "months"];
  const result = document.getElementById("result");
  const status = document.getElementById("save-status");
  let timer = null;
  // One id per set of inputs; repeat saves of the same result overwrite one record
  let requestId = null;

  function values() {
    const body = {};
    fields.forEach(function (name) { body[name] = form.elements[name].value; });
    return body;
  }

  function showErrors(fieldErrors) {
    fields.forEach(function (name) {
      const messages = fieldErrors[name] || [];
      document.getElementById(name + "-error").textContent = messages.join(" ");
      form.elements[name].toggleAttribute("aria-invalid", messages.length > 0);
    });
  }

  function showResult(data) {
    result.hidden = false;
    result.innerHTML =
      "<h2>Calculation Results (" + data.currency + ")</h2>" +
      "<p>Monthly EMI: <strong id=\\"monthly-payment\\">" + data.formatted_monthly_payment + "</strong></p>" +
      "<p>Total Amount: <span id=\\"total-payment\\">" + data.formatted_total_payment + "</span></p>" +
      "<p>Total Interest: <span id=\\"total-interest\\">" + data.formatted_total_interest + "</span></p>";
  }

  async function refresh() {
    const response = await fetch("/v1/emi", {
      method: "POST",
      headers: {"Content-Type": "application/json"},
      body: JSON.stringify(values()),
    });
    const data = await response.json();
    if (response.ok) {
      showErrors({});
      showResult(data);
    } else {
      showErrors(data.field_errors || {});
      result.hidden = true;
    }
  }

  form.addEventListener("input", function () {
    requestId = null;
    clearTimeout(timer);
    timer = setTimeout(refresh, 200);
  });

  document.getElementById("save").addEventListener("click", async function () {
    if (requestId === null) {
      requestId = crypto.randomUUID();
    }
    const body = Object.assign(values(), {
      currency: form.dataset.currency,
      client_request_id: requestId,
    });
    status.textContent = "";
    try {
      const response = await fetch("/v1/calculations", {
        method: "POST",
        headers: {"Content-Type": "application/json"},
        body: JSON.stringify(body),
      });
      const data = await response.json();
      if (response.ok) {
        status.textContent = "Saved (" + data.id + ")";
      } else if (data.field_errors) {
        showErrors(data.field_errors);
      } else {
        status.textContent = "Could not save calculation.";
      }
    } catch (e) {
      status.textContent = "Could not save calculation.";
    }
  });
})();
</script>"""


def render_form_page(
    values: Mapping[str, str],
    result: Optional[CalculationResult],
    field_errors: Dict[str, List[str]],
    currency_code: str,
    currency_symbol: str,
) -> str:
    """
    Render the complete form page.

    Field messages appear next to their inputs; the result panel is only
    shown when the inputs are valid.
    """
    rendered_fields = "".join(
        _render_field(name, label, minimum, maximum, step, values.get(name, ""), field_errors.get(name, []))
        for name, label, minimum, maximum, step in FORM_FIELDS
    )

    return f"""<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>EMI Calculator</title>
  <style>
    body {{ font-family: system-ui, sans-serif; max-width: 36rem; margin: 2rem auto; }}
    .field {{ display: flex; flex-direction: column; margin-bottom: 1rem; }}
    .field-error {{ color: #b00020; font-size: 0.875rem; min-height: 1.25rem; }}
    .result {{ border-top: 1px solid #ccc; padding-top: 1rem; }}
  </style>
</head>
<body>
  <h1>EMI Calculator</h1>
  <form id="emi-form" method="get" action="/" novalidate data-currency="{escape(currency_code)}">{rendered_fields}
      <button type="submit">Calculate</button>
      <button type="button" id="save">Save</button>
      <span id="save-status" role="status"></span>
  </form>
  {_render_result(result, currency_symbol)}
  {SCRIPT}
</body>
</html>
"""
