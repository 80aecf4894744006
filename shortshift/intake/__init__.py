"""Client-side intake form: metadata helpers, form state and submission."""
