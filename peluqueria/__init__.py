"""
Peluquería administration dashboard.

The dashboard is a Flask application that lets the staff of a barbershop
("peluquería") manage the service catalog and the accounts of their staff and
clients. It holds no business data of its own: servicios and usuarios live
behind a REST API, and credentials, tokens and profile rows are owned by a
hosted authentication provider.

Context
-------
Staff log in with their e-mail and password. The login controller signs in at
the authentication provider, looks up the profile row and the peluquería the
profile belongs to, and merges the three into an :class:`.Identity`.

The identity is kept in a :class:`.SessionStore`. The store is built at the
start of every request by the :class:`.Auth` extension and rehydrated from an
encrypted envelope kept on the browser side (a cookie, or a redis namespace
bound to the browser). Until rehydration has finished the store is not
"ready", and the route guard renders a placeholder instead of deciding that
the visitor is logged out.

Protected screens (servicios, usuarios) call the REST API on behalf of the
identity, applying mutations optimistically and rolling back to the last
known good list when the API refuses them.
"""
