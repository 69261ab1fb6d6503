"""formflow_server: FastAPI app serving the bundled form journeys.

Mounts each journey's portal (create journey) and manage
(list/detail/delete/edit) routes over the ``formflow_journeys``
controllers.  The signed cookie carries a session id; answers live in
the ``journey_sessions`` table.
"""
