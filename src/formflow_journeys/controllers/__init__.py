"""Request handlers for the create, edit and manage flows.

Controllers take plain inputs (answer store, flash channel, DB session,
URL segments, form body) and return a ``ControllerResult``; the server's
routes turn that into an HTTP response.
"""

from formflow_journeys.controllers.edit import EditController
from formflow_journeys.controllers.manage import ManageController
from formflow_journeys.controllers.save import SaveController

__all__ = ["EditController", "ManageController", "SaveController"]
