"""Authentication and authorization: JWT, passwords, principals and request guards."""
