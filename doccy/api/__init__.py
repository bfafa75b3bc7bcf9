"""
The `api` package defines the backend's request handling, along with
supporting data models.

It integrates the LangGraph agent pipeline, FastAPI routing and the
startup wiring that builds the shared database handle and stores.

Contents
--------
- agent_pipeline
    Orchestration of the LangGraph intent-routed workflow:
        * Classifies the request as get_information / web_search / conversation
        * Routes to the matching handler and generates the persona reply
        * Folds any error into a fixed fallback response

- prompts
    Persona prompts and task templates, plus persona file loading.

- models
    Pydantic schemas for chat messages, vector entries, intents and
    request/response payloads.

- fast_api
    FastAPI router with endpoints for:
        * Running a prompt through the pipeline
        * Reading and appending chat history
        * Liveness checks

- app
    FastAPI application factory.

- dependencies
    Cached construction of the database, embedding store and pipeline.
"""
