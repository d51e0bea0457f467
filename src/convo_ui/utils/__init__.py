"""Pure helpers: value coercion and condition evaluation."""
