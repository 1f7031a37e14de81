"""Core tracker logic: models, hierarchy reducers, progress and completion."""
