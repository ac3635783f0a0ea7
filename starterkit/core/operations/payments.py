"""
Payment operations: Stripe checkout and webhooks.
"""

from __future__ import annotations

from pydantic import Field

from starterkit.core.engine.executor import RunContext
from starterkit.core.models.report import RunReport
from starterkit.core.models.state import Capability
from starterkit.core.models.step import Operation, Step, refuses, requires
from starterkit.core.operations.auth import AUTH_MISSING
from starterkit.core.operations.common import (
    NEXTJS_MISSING,
    ProjectParams,
    append_lines,
    bullet,
    has,
    step,
    success_message,
    write,
)
from starterkit.core.services.packages import install_actions
from starterkit.core.templates import payments as tpl

STRIPE_MISSING = "Stripe payments not found. Run 'setup_stripe_payments' first."


# ── setup_stripe_payments ───────────────────────────────────────


class StripeParams(ProjectParams):
    include_subscriptions: bool = Field(
        True, alias="includeSubscriptions", description="Include subscription billing (default: true)"
    )
    include_one_time: bool = Field(True, alias="includeOneTime", description="Include one-time payments (default: true)")
    require_auth: bool = Field(
        True, alias="requireAuth", description="Require authentication to be set up first (default: true)"
    )


def _plan_stripe(params: StripeParams, ctx: RunContext) -> list[Step]:
    steps = [
        step("Installing Stripe SDK...", install_actions("stripe", ctx.package_manager)),
        step(
            "Creating Stripe client and payment utilities...",
            write("lib/payments/stripe.ts", tpl.STRIPE_CLIENT),
            write("lib/payments/utils.ts", tpl.PAYMENT_UTILS),
            write("types/payments.ts", tpl.PAYMENT_TYPES),
        ),
    ]
    if params.include_subscriptions:
        steps += [
            step("Creating subscription model...", write("models/subscription.ts", tpl.SUBSCRIPTION_MODEL)),
            step(
                "Creating subscription queries...",
                write("lib/db/subscription-queries.ts", tpl.SUBSCRIPTION_QUERIES),
                when=has(Capability.DRIZZLE),
                skip="(Drizzle ORM not detected; subscription queries skipped)",
            ),
        ]

    components = [write("components/payments/index.ts", tpl.components_index(params.include_subscriptions, params.include_one_time))]
    if params.include_one_time:
        components.insert(0, write("components/payments/checkout-button.tsx", tpl.CHECKOUT_BUTTON))
    if params.include_subscriptions:
        components.insert(0, write("components/payments/pricing-table.tsx", tpl.PRICING_TABLE))
    steps += [
        step("Creating checkout server actions...", write("actions/payments.ts", tpl.CHECKOUT_ACTIONS)),
        step("Creating payment components...", components),
        step(
            "Adding Stripe keys to .env.example...",
            append_lines(".env.example", tpl.STRIPE_ENV_LINES),
            when=has(Capability.ENVIRONMENT_VARS),
            skip="(no .env.example yet; run 'setup_environment_vars' to include Stripe keys)",
            fatal=False,
        ),
    ]
    return steps


def _summarize_stripe(params: StripeParams, report: RunReport, ctx: RunContext) -> str:
    features = ["Stripe client (lib/payments/stripe.ts)", "Checkout server actions"]
    if params.include_subscriptions:
        features.append("Subscription model and pricing table")
    if params.include_one_time:
        features.append("One-time checkout button")
    return success_message(
        "Stripe payments setup completed successfully!",
        report,
        "💳 **Includes:**\n" + bullet(features),
        [
            "Add your Stripe keys to `.env.local`",
            "Create products and prices in the Stripe dashboard",
            "Run `setup_stripe_webhooks` to sync subscription state",
        ],
    )


STRIPE_PAYMENTS = Operation(
    name="setup_stripe_payments",
    description="Sets up Stripe payments with subscriptions and one-time payments",
    params_model=StripeParams,
    plan=_plan_stripe,
    summarize=_summarize_stripe,
    preconditions=(
        requires(Capability.NEXTJS, NEXTJS_MISSING),
        refuses(Capability.STRIPE, "Stripe payments are already set up in this project."),
        requires(Capability.AUTHENTICATION, AUTH_MISSING, flag="require_auth"),
    ),
)


# ── setup_stripe_webhooks ───────────────────────────────────────


class WebhookParams(ProjectParams):
    include_customer_portal: bool = Field(
        True, alias="includeCustomerPortal", description="Include the Stripe customer portal (default: true)"
    )
    require_stripe: bool = Field(
        True, alias="requireStripe", description="Require Stripe payments to be set up first (default: true)"
    )


def _plan_webhooks(params: WebhookParams, ctx: RunContext) -> list[Step]:
    steps = [
        step(
            "Creating webhook handlers and utilities...",
            write("lib/payments/webhook-handlers.ts", tpl.WEBHOOK_HANDLERS),
            write("lib/payments/webhook-utils.ts", tpl.WEBHOOK_UTILS),
        ),
        step("Creating webhook endpoint...", write("app/api/webhooks/stripe/route.ts", tpl.WEBHOOK_ROUTE)),
    ]
    if params.include_customer_portal:
        steps.append(
            step(
                "Creating customer portal...",
                write("app/api/stripe/portal/route.ts", tpl.PORTAL_ROUTE),
                write("components/payments/customer-portal.tsx", tpl.CUSTOMER_PORTAL),
            )
        )
    steps.append(step("Writing webhook testing guide...", write("docs/stripe-webhooks.md", tpl.WEBHOOKS_GUIDE)))
    return steps


def _summarize_webhooks(params: WebhookParams, report: RunReport, ctx: RunContext) -> str:
    return success_message(
        "Stripe webhooks setup completed successfully!",
        report,
        "🔗 **Endpoint:** `POST /api/webhooks/stripe`",
        [
            "Set `STRIPE_WEBHOOK_SECRET` in `.env.local`",
            "Follow docs/stripe-webhooks.md to forward events locally",
        ],
    )


STRIPE_WEBHOOKS = Operation(
    name="setup_stripe_webhooks",
    description="Sets up Stripe webhooks and customer portal",
    params_model=WebhookParams,
    plan=_plan_webhooks,
    summarize=_summarize_webhooks,
    preconditions=(
        requires(Capability.NEXTJS, NEXTJS_MISSING),
        requires(Capability.STRIPE, STRIPE_MISSING, flag="require_stripe"),
        refuses(Capability.STRIPE_WEBHOOKS, "Stripe webhooks are already set up in this project."),
    ),
)
