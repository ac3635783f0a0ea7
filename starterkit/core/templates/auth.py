"""JWT authentication and route protection."""

SESSION = """\
import { SignJWT, jwtVerify } from "jose";
import { cookies } from "next/headers";

const key = new TextEncoder().encode(process.env.AUTH_SECRET);

export type SessionData = { user: { id: number }; expires: string };

export async function signToken(payload: SessionData) {
  return new SignJWT(payload)
    .setProtectedHeader({ alg: "HS256" })
    .setIssuedAt()
    .setExpirationTime("1 day from now")
    .sign(key);
}

export async function verifyToken(input: string) {
  const { payload } = await jwtVerify(input, key, { algorithms: ["HS256"] });
  return payload as SessionData;
}

export async function getSession() {
  const session = (await cookies()).get("session")?.value;
  if (!session) return null;
  return verifyToken(session);
}

export async function setSession(userId: number) {
  const expires = new Date(Date.now() + 24 * 60 * 60 * 1000);
  const token = await signToken({ user: { id: userId }, expires: expires.toISOString() });
  (await cookies()).set("session", token, { expires, httpOnly: true, secure: true, sameSite: "lax" });
}
"""

PASSWORD = """\
import { compare, hash } from "bcryptjs";

const SALT_ROUNDS = 10;

export function hashPassword(password: string) {
  return hash(password, SALT_ROUNDS);
}

export function comparePasswords(plain: string, hashed: string) {
  return compare(plain, hashed);
}
"""

AUTH_HELPERS = """\
import { redirect } from "next/navigation";
import { getSession } from "./session";

export async function requireSession() {
  const session = await getSession();
  if (!session) redirect("/auth/login");
  return session;
}
"""

VALIDATIONS = """\
import { z } from "zod";

export const signInSchema = z.object({
  email: z.string().email(),
  password: z.string().min(8).max(100),
});

export const signUpSchema = signInSchema.extend({
  name: z.string().min(1).max(100),
});
"""

ACTIONS = """\
"use server";

import { redirect } from "next/navigation";
import { setSession } from "@/lib/auth/session";
import { signInSchema, signUpSchema } from "@/validations/auth";

export async function signIn(_: unknown, formData: FormData) {
  const parsed = signInSchema.safeParse(Object.fromEntries(formData));
  if (!parsed.success) return { error: parsed.error.issues[0]?.message };
  // look up the user and compare the password hash here
  await setSession(1);
  redirect("/dashboard");
}

export async function signUp(_: unknown, formData: FormData) {
  const parsed = signUpSchema.safeParse(Object.fromEntries(formData));
  if (!parsed.success) return { error: parsed.error.issues[0]?.message };
  redirect("/dashboard");
}
"""

LOGIN_FORM = """\
"use client";

import { useActionState } from "react";
import { signIn } from "@/actions/auth";

export function LoginForm() {
  const [state, action, pending] = useActionState(signIn, null);
  return (
    <form action={action} className="space-y-4">
      <input name="email" type="email" required />
      <input name="password" type="password" required />
      {state?.error && <p className="text-destructive">{state.error}</p>}
      <button type="submit" disabled={pending}>Sign in</button>
    </form>
  );
}
"""

SIGNUP_FORM = """\
"use client";

import { useActionState } from "react";
import { signUp } from "@/actions/auth";

export function SignupForm() {
  const [state, action, pending] = useActionState(signUp, null);
  return (
    <form action={action} className="space-y-4">
      <input name="name" required />
      <input name="email" type="email" required />
      <input name="password" type="password" required />
      {state?.error && <p className="text-destructive">{state.error}</p>}
      <button type="submit" disabled={pending}>Create account</button>
    </form>
  );
}
"""

COMPONENTS_INDEX = """\
export { LoginForm } from "./login-form";
export { SignupForm } from "./signup-form";
"""

USER_MODEL = """\
import { pgTable, serial, text, timestamp, varchar } from "drizzle-orm/pg-core";

export const users = pgTable("users", {
  id: serial("id").primaryKey(),
  name: varchar("name", { length: 100 }),
  email: varchar("email", { length: 255 }).notNull().unique(),
  passwordHash: text("password_hash").notNull(),
  role: varchar("role", { length: 20 }).notNull().default("member"),
  createdAt: timestamp("created_at").notNull().defaultNow(),
  deletedAt: timestamp("deleted_at"),
});

export type User = typeof users.$inferSelect;
export type NewUser = typeof users.$inferInsert;
"""

USER_QUERIES = """\
import { and, eq, isNull } from "drizzle-orm";
import { db } from "./index";
import { users } from "@/models/user";

export async function getUserByEmail(email: string) {
  const rows = await db.select().from(users)
    .where(and(eq(users.email, email), isNull(users.deletedAt)))
    .limit(1);
  return rows[0] ?? null;
}
"""

_PROTECTED = '["/dashboard"]'

ROUTE_MIDDLEWARE_BASIC = f"""\
import {{ NextResponse, type NextRequest }} from "next/server";

const protectedRoutes = {_PROTECTED};

export function middleware(request: NextRequest) {{
  const session = request.cookies.get("session");
  const isProtected = protectedRoutes.some((r) => request.nextUrl.pathname.startsWith(r));
  if (isProtected && !session) {{
    return NextResponse.redirect(new URL("/auth/login", request.url));
  }}
  return NextResponse.next();
}}

export const config = {{ matcher: ["/((?!api|_next/static|_next/image|favicon.ico).*)"] }};
"""

ROUTE_MIDDLEWARE_ADVANCED = """\
import { NextResponse, type NextRequest } from "next/server";
import { signToken, verifyToken } from "@/lib/auth/session";
import { isProtectedRoute } from "@/lib/route-config";

export async function middleware(request: NextRequest) {
  const session = request.cookies.get("session");
  const { pathname } = request.nextUrl;

  if (isProtectedRoute(pathname) && !session) {
    return NextResponse.redirect(new URL("/auth/login", request.url));
  }

  const res = NextResponse.next();
  if (session && request.method === "GET") {
    try {
      const parsed = await verifyToken(session.value);
      const expires = new Date(Date.now() + 24 * 60 * 60 * 1000);
      res.cookies.set({
        name: "session",
        value: await signToken({ ...parsed, expires: expires.toISOString() }),
        httpOnly: true,
        secure: true,
        sameSite: "lax",
        expires,
      });
    } catch {
      res.cookies.delete("session");
      if (isProtectedRoute(pathname)) {
        return NextResponse.redirect(new URL("/auth/login", request.url));
      }
    }
  }
  return res;
}

export const config = { matcher: ["/((?!api|_next/static|_next/image|favicon.ico).*)"] };
"""

ROUTE_CONFIG = """\
export const protectedRoutes = ["/dashboard", "/settings", "/team"];
export const authRoutes = ["/auth/login", "/auth/signup"];

export function isProtectedRoute(pathname: string) {
  return protectedRoutes.some((route) => pathname.startsWith(route));
}
"""

LOGIN_PAGE = """\
import { LoginForm } from "@/components/auth";

export default function LoginPage() {
  return <main className="mx-auto max-w-sm py-16"><LoginForm /></main>;
}
"""

SIGNUP_PAGE = """\
import { SignupForm } from "@/components/auth";

export default function SignupPage() {
  return <main className="mx-auto max-w-sm py-16"><SignupForm /></main>;
}
"""

DASHBOARD_LAYOUT = """\
import { requireSession } from "@/lib/auth/middleware";

export default async function DashboardLayout({ children }: { children: React.ReactNode }) {
  await requireSession();
  return <div className="min-h-screen">{children}</div>;
}
"""

DASHBOARD_PAGE = """\
export default function DashboardPage() {
  return <h1 className="text-2xl font-semibold">Dashboard</h1>;
}
"""
