"""Turn free-text SaaS ideas into idea maps, tech stacks, MVP plans and dev prompts."""
