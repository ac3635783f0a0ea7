"""Multi-tenant team management."""

TEAM_MODEL = """\
import { integer, pgTable, serial, text, timestamp, varchar } from "drizzle-orm/pg-core";

export const teams = pgTable("teams", {
  id: serial("id").primaryKey(),
  name: varchar("name", { length: 100 }).notNull(),
  stripeCustomerId: text("stripe_customer_id").unique(),
  createdAt: timestamp("created_at").notNull().defaultNow(),
});

export const teamMembers = pgTable("team_members", {
  id: serial("id").primaryKey(),
  teamId: integer("team_id").notNull().references(() => teams.id),
  userId: integer("user_id").notNull(),
  role: varchar("role", { length: 20 }).notNull().default("member"),
  joinedAt: timestamp("joined_at").notNull().defaultNow(),
});
"""

ACTIVITY_LOG_MODEL = """\
import { integer, pgTable, serial, text, timestamp } from "drizzle-orm/pg-core";

export const activityLogs = pgTable("activity_logs", {
  id: serial("id").primaryKey(),
  teamId: integer("team_id").notNull(),
  userId: integer("user_id"),
  action: text("action").notNull(),
  ipAddress: text("ip_address"),
  timestamp: timestamp("timestamp").notNull().defaultNow(),
});
"""

TEAM_QUERIES = """\
import { eq } from "drizzle-orm";
import { db } from "./index";
import { teamMembers, teams } from "@/models/team";

export async function getTeamsForUser(userId: number) {
  return db.select({ team: teams, role: teamMembers.role })
    .from(teamMembers)
    .innerJoin(teams, eq(teams.id, teamMembers.teamId))
    .where(eq(teamMembers.userId, userId));
}
"""

TEAM_ACTIONS = """\
"use server";

import { revalidatePath } from "next/cache";
import { createTeamSchema, inviteMemberSchema } from "@/validations/team";

export async function createTeam(formData: FormData) {
  const parsed = createTeamSchema.safeParse(Object.fromEntries(formData));
  if (!parsed.success) return { error: parsed.error.issues[0]?.message };
  revalidatePath("/dashboard");
}

export async function inviteMember(formData: FormData) {
  const parsed = inviteMemberSchema.safeParse(Object.fromEntries(formData));
  if (!parsed.success) return { error: parsed.error.issues[0]?.message };
  revalidatePath("/team");
}
"""

TEAM_VALIDATIONS = """\
import { z } from "zod";

export const createTeamSchema = z.object({ name: z.string().min(1).max(100) });

export const inviteMemberSchema = z.object({
  email: z.string().email(),
  role: z.enum(["owner", "admin", "member"]),
});
"""

PERMISSIONS = """\
export const roles = ["owner", "admin", "member"] as const;
export type Role = (typeof roles)[number];

const rank: Record<Role, number> = { owner: 3, admin: 2, member: 1 };

export function can(role: Role, required: Role) {
  return rank[role] >= rank[required];
}
"""

TEAM_SWITCHER = """\
"use client";

export function TeamSwitcher({ teams }: { teams: { id: number; name: string }[] }) {
  return (
    <select>{teams.map((t) => <option key={t.id} value={t.id}>{t.name}</option>)}</select>
  );
}
"""

MEMBER_LIST = """\
export function MemberList({ members }: { members: { id: number; email: string; role: string }[] }) {
  return <ul>{members.map((m) => <li key={m.id}>{m.email} ({m.role})</li>)}</ul>;
}
"""

TEAM_FORM = """\
import { createTeam } from "@/actions/team";

export function TeamForm() {
  return (
    <form action={createTeam}>
      <input name="name" required />
      <button type="submit">Create team</button>
    </form>
  );
}
"""

COMPONENTS_INDEX = """\
export { MemberList } from "./member-list";
export { TeamForm } from "./team-form";
export { TeamSwitcher } from "./team-switcher";
"""
