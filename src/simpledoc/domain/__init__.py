"""Pure domain logic: naming rules, classification, actions, frontmatter."""
