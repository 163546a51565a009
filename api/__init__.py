"""HTTP routers for the tenant intake API."""
