"""Stripe payments, webhooks and customer portal."""

STRIPE_CLIENT = """\
import Stripe from "stripe";

export const stripe = new Stripe(process.env.STRIPE_SECRET_KEY!, {
  apiVersion: "2025-02-24.acacia",
});
"""

PAYMENT_UTILS = """\
export function formatAmount(amount: number, currency = "usd") {
  return new Intl.NumberFormat("en-US", { style: "currency", currency }).format(amount / 100);
}
"""

SUBSCRIPTION_MODEL = """\
import { integer, pgTable, serial, text, timestamp, varchar } from "drizzle-orm/pg-core";

export const subscriptions = pgTable("subscriptions", {
  id: serial("id").primaryKey(),
  userId: integer("user_id").notNull(),
  stripeCustomerId: text("stripe_customer_id").notNull(),
  stripeSubscriptionId: text("stripe_subscription_id").unique(),
  status: varchar("status", { length: 20 }).notNull(),
  currentPeriodEnd: timestamp("current_period_end"),
});
"""

SUBSCRIPTION_QUERIES = """\
import { eq } from "drizzle-orm";
import { db } from "./index";
import { subscriptions } from "@/models/subscription";

export async function getSubscriptionByCustomer(customerId: string) {
  const rows = await db.select().from(subscriptions)
    .where(eq(subscriptions.stripeCustomerId, customerId)).limit(1);
  return rows[0] ?? null;
}
"""

CHECKOUT_ACTIONS = """\
"use server";

import { redirect } from "next/navigation";
import { stripe } from "@/lib/payments/stripe";

export async function createCheckoutSession(priceId: string, mode: "payment" | "subscription") {
  const session = await stripe.checkout.sessions.create({
    mode,
    line_items: [{ price: priceId, quantity: 1 }],
    success_url: `${process.env.BASE_URL}/dashboard?checkout=success`,
    cancel_url: `${process.env.BASE_URL}/pricing`,
  });
  redirect(session.url!);
}
"""

CHECKOUT_BUTTON = """\
"use client";

import { createCheckoutSession } from "@/actions/payments";

export function CheckoutButton({ priceId }: { priceId: string }) {
  return <button onClick={() => createCheckoutSession(priceId, "payment")}>Buy now</button>;
}
"""

PRICING_TABLE = """\
import { createCheckoutSession } from "@/actions/payments";

export function PricingTable({ plans }: { plans: { name: string; priceId: string }[] }) {
  return (
    <div className="grid gap-4 md:grid-cols-3">
      {plans.map((plan) => (
        <form key={plan.priceId} action={createCheckoutSession.bind(null, plan.priceId, "subscription")}>
          <h3>{plan.name}</h3>
          <button type="submit">Subscribe</button>
        </form>
      ))}
    </div>
  );
}
"""

PAYMENT_TYPES = """\
export type Plan = { name: string; priceId: string; interval: "month" | "year" };
export type SubscriptionStatus = "active" | "trialing" | "past_due" | "canceled";
"""

STRIPE_ENV_LINES = [
    "STRIPE_SECRET_KEY=sk_test_",
    "STRIPE_WEBHOOK_SECRET=whsec_",
    "NEXT_PUBLIC_STRIPE_PUBLISHABLE_KEY=pk_test_",
]

WEBHOOK_ROUTE = """\
import { NextResponse, type NextRequest } from "next/server";
import { handleStripeEvent } from "@/lib/payments/webhook-handlers";
import { constructEvent } from "@/lib/payments/webhook-utils";

export async function POST(request: NextRequest) {
  const payload = await request.text();
  const signature = request.headers.get("stripe-signature") ?? "";
  try {
    await handleStripeEvent(constructEvent(payload, signature));
  } catch (err) {
    return NextResponse.json({ error: String(err) }, { status: 400 });
  }
  return NextResponse.json({ received: true });
}
"""

WEBHOOK_HANDLERS = """\
import type Stripe from "stripe";

export async function handleStripeEvent(event: Stripe.Event) {
  switch (event.type) {
    case "customer.subscription.created":
    case "customer.subscription.updated":
    case "customer.subscription.deleted":
      // sync the subscription row here
      break;
    case "checkout.session.completed":
      break;
  }
}
"""

WEBHOOK_UTILS = """\
import { stripe } from "./stripe";

export function constructEvent(payload: string, signature: string) {
  return stripe.webhooks.constructEvent(payload, signature, process.env.STRIPE_WEBHOOK_SECRET!);
}
"""

PORTAL_ROUTE = """\
import { NextResponse } from "next/server";
import { stripe } from "@/lib/payments/stripe";

export async function POST(request: Request) {
  const { customerId } = await request.json();
  const session = await stripe.billingPortal.sessions.create({
    customer: customerId,
    return_url: `${process.env.BASE_URL}/dashboard`,
  });
  return NextResponse.json({ url: session.url });
}
"""

CUSTOMER_PORTAL = """\
"use client";

export function CustomerPortalButton({ customerId }: { customerId: string }) {
  async function open() {
    const res = await fetch("/api/stripe/customer-portal", {
      method: "POST",
      body: JSON.stringify({ customerId }),
    });
    window.location.href = (await res.json()).url;
  }
  return <button onClick={open}>Manage billing</button>;
}
"""

WEBHOOKS_GUIDE = """\
# Stripe Webhooks

1. `stripe listen --forward-to localhost:3000/api/webhooks/stripe`
2. Copy the printed signing secret into `STRIPE_WEBHOOK_SECRET`.
3. Trigger events with `stripe trigger checkout.session.completed`.
"""


def components_index(subscriptions: bool, one_time: bool, portal: bool = False) -> str:
    lines = []
    if one_time:
        lines.append('export { CheckoutButton } from "./checkout-button";')
    if subscriptions:
        lines.append('export { PricingTable } from "./pricing-table";')
    if portal:
        lines.append('export { CustomerPortalButton } from "./customer-portal";')
    return "\n".join(lines) + "\n"
