# Request dependencies shared by the API routers: the current user and their workspace.
