"""React Hook Form helpers, Zod schemas and React Query wiring."""

HOOKS = """\
import { zodResolver } from "@hookform/resolvers/zod";
import { useForm, type UseFormProps } from "react-hook-form";
import type { z } from "zod";

export function useZodForm<T extends z.ZodTypeAny>(schema: T, options?: UseFormProps<z.infer<T>>) {
  return useForm<z.infer<T>>({ resolver: zodResolver(schema), ...options });
}
"""

HOOKS_PLAIN = """\
import { useForm, type FieldValues, type UseFormProps } from "react-hook-form";

export function useAppForm<T extends FieldValues>(options?: UseFormProps<T>) {
  return useForm<T>({ mode: "onBlur", ...options });
}
"""

TYPES = """\
export type FormState = { error?: string; success?: boolean };
"""

UTILS = """\
export function toFormData(values: Record<string, unknown>) {
  const data = new FormData();
  for (const [key, value] of Object.entries(values)) {
    if (value !== undefined && value !== null) data.append(key, String(value));
  }
  return data;
}
"""

QUERY_HOOKS = """\
import { useMutation, useQueryClient } from "@tanstack/react-query";

export function useFormMutation<T>(fn: (values: T) => Promise<unknown>, invalidate: string[] = []) {
  const client = useQueryClient();
  return useMutation({
    mutationFn: fn,
    onSuccess: () => Promise.all(invalidate.map((key) => client.invalidateQueries({ queryKey: [key] }))),
  });
}
"""

QUERY_PROVIDER = """\
"use client";

import { QueryClient, QueryClientProvider } from "@tanstack/react-query";
import { useState } from "react";

export function QueryProvider({ children }: { children: React.ReactNode }) {
  const [client] = useState(() => new QueryClient());
  return <QueryClientProvider client={client}>{children}</QueryClientProvider>;
}
"""

SCHEMAS = """\
import { z } from "zod";

export const contactSchema = z.object({
  name: z.string().min(1, "Name is required"),
  email: z.string().email("Enter a valid email"),
  message: z.string().min(10).max(1000),
});

export type ContactValues = z.infer<typeof contactSchema>;
"""

FIELD_COMPONENTS = {
    "form-field.tsx": """\
export function FormField({ label, error, children }: { label: string; error?: string; children: React.ReactNode }) {
  return (
    <label className="grid gap-1">
      <span>{label}</span>
      {children}
      {error && <span className="text-sm text-destructive">{error}</span>}
    </label>
  );
}
""",
    "form-input.tsx": """\
import { forwardRef } from "react";

export const FormInput = forwardRef<HTMLInputElement, React.ComponentProps<"input">>((props, ref) => (
  <input ref={ref} className="rounded border px-3 py-2" {...props} />
));
FormInput.displayName = "FormInput";
""",
    "form-textarea.tsx": """\
import { forwardRef } from "react";

export const FormTextarea = forwardRef<HTMLTextAreaElement, React.ComponentProps<"textarea">>((props, ref) => (
  <textarea ref={ref} className="rounded border px-3 py-2" {...props} />
));
FormTextarea.displayName = "FormTextarea";
""",
    "form-select.tsx": """\
import { forwardRef } from "react";

export const FormSelect = forwardRef<HTMLSelectElement, React.ComponentProps<"select">>((props, ref) => (
  <select ref={ref} className="rounded border px-3 py-2" {...props} />
));
FormSelect.displayName = "FormSelect";
""",
    "form-checkbox.tsx": """\
import { forwardRef } from "react";

export const FormCheckbox = forwardRef<HTMLInputElement, React.ComponentProps<"input">>((props, ref) => (
  <input ref={ref} type="checkbox" {...props} />
));
FormCheckbox.displayName = "FormCheckbox";
""",
    "form-submit-button.tsx": """\
"use client";

import { useFormStatus } from "react-dom";

export function FormSubmitButton({ children }: { children: React.ReactNode }) {
  const { pending } = useFormStatus();
  return <button type="submit" disabled={pending}>{pending ? "Saving..." : children}</button>;
}
""",
}

COMPONENTS_INDEX = """\
export { FormCheckbox } from "./form-checkbox";
export { FormField } from "./form-field";
export { FormInput } from "./form-input";
export { FormSelect } from "./form-select";
export { FormSubmitButton } from "./form-submit-button";
export { FormTextarea } from "./form-textarea";
"""


def lib_index(react_query: bool) -> str:
    lines = ['export * from "./hooks";', 'export * from "./types";', 'export * from "./utils";']
    if react_query:
        lines += ['export * from "./query-hooks";', 'export * from "./query-provider";']
    return "\n".join(lines) + "\n"
