"""
Transport layers of the catalog.

``v1`` holds the REST routes, ``graphql`` the GraphQL schema.  Both
call the same record services, which the application stores on
``app.state``; ``deps`` hands them to the route handlers.
"""
