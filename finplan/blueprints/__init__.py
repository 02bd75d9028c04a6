"""Flask blueprints for the financial planning API."""
