"""Services Layer — async orchestration between routes and the store collaborator."""
