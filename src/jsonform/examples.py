"""
Example checkout form used by the demo and the tests.

Two sections: "customer" (identity and address, with a country-dependent
promo field) and "payment" (method-dependent card fields and its own submit
button).
"""
from typing import Any, Dict


def build_example_checkout_schema(with_submit: bool = True) -> Dict[str, Any]:
    payment: Dict[str, Any] = {
        "slug": "payment",
        "title": "Payment",
        "categories": [
            {
                "slug": "method",
                "questions": [
                    {
                        "key": "payment_method",
                        "type": "choice",
                        "label": "Payment method",
                        "required": True,
                        "choices": {"Card": "card", "Transfer": "transfer"},
                        "data": "card",
                    },
                    {
                        "key": "card_number",
                        "type": "text",
                        "constraints": {"NotBlank": None, "Luhn": {"message": "Invalid card number"}},
                        "displayDependencies": {
                            "operator": "AND",
                            "conditions": [{"field": "payment_method", "equals": "card"}],
                        },
                    },
                    {
                        "key": "card_expiry",
                        "type": "date",
                        "displayDependencies": {
                            "operator": "AND",
                            "conditions": [{"field": "payment_method", "equals": "card"}],
                        },
                    },
                ],
            }
        ],
    }
    if with_submit:
        payment["submit"] = {"label": "Pay", "attr": {"data-step": "payment"}}

    return {
        "slug": "checkout",
        "displayOptions": {
            "sections": {"attr": {"class": "form-section"}},
            "categories": {"attr": {"class": "form-category"}, "label_attr": {"class": "h5"}},
        },
        "sections": [
            {
                "slug": "customer",
                "title": "Customer",
                "categories": [
                    {
                        "slug": "identity",
                        "questions": [
                            {
                                "key": "email",
                                "type": "email",
                                "required": True,
                                "constraints": {"NotBlank": None, "Email": {"mode": "strict"}},
                            },
                            {"key": "age", "type": "integer", "constraints": {"Range": {"min": 18}}},
                            {
                                "key": "newsletter",
                                "type": "checkbox",
                                "label": "Subscribe to the newsletter",
                                "data": False,
                            },
                        ],
                    },
                    {
                        "slug": "address",
                        "questions": [
                            {"key": "country", "type": "country", "data": "FR"},
                            {
                                "key": "promo",
                                "type": "text",
                                "displayDependencies": {
                                    "operator": "AND",
                                    "conditions": [
                                        {"field": "country", "equals": "FR"},
                                        {
                                            "operator": "OR",
                                            "conditions": [
                                                {"field": "age", "greaterThanOrEqual": 18},
                                                {"field": "newsletter", "equals": True},
                                            ],
                                        },
                                    ],
                                },
                            },
                        ],
                    },
                ],
            },
            payment,
        ],
    }
