"""Glue for the all-in-one SaaS scaffold: middleware and database scripts."""

SAAS_MIDDLEWARE = """\
import { NextResponse, type NextRequest } from "next/server";

const protectedRoutes = "/dashboard";

export async function middleware(request: NextRequest) {
  const session = request.cookies.get("session");
  if (request.nextUrl.pathname.startsWith(protectedRoutes) && !session) {
    return NextResponse.redirect(new URL("/auth/login", request.url));
  }
  return NextResponse.next();
}

export const config = { matcher: ["/((?!api|_next/static|_next/image|favicon.ico).*)"] };
"""

DB_SETUP = """\
import { stripe } from "@/lib/payments/stripe";

async function createProducts() {
  const base = await stripe.products.create({ name: "Base" });
  await stripe.prices.create({ product: base.id, unit_amount: 800, currency: "usd", recurring: { interval: "month" } });
  const plus = await stripe.products.create({ name: "Plus" });
  await stripe.prices.create({ product: plus.id, unit_amount: 1200, currency: "usd", recurring: { interval: "month" } });
}

createProducts().then(() => console.log("Stripe products created"));
"""

DB_SEED = """\
import { db } from "./index";
import { users } from "./schema";
import { hashPassword } from "@/lib/auth/password";

async function seed() {
  await db.insert(users).values({ email: "test@test.com", passwordHash: await hashPassword("admin123") });
}

seed().then(() => process.exit(0));
"""
