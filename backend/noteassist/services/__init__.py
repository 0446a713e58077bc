# Services package init
"""
NoteAssist Backend — Services Layer
=====================================

What:  Business logic layer sitting between routes (HTTP) and external systems.
Why:   Routes handle HTTP; services handle ownership rules and provider calls.

Service Inventory:
    - NoteService:            owner-scoped CRUD over the notes table
    - TextAssistService:      summarize / improve / ideas prompt building
    - LLMService (abstract):  "submit instruction, receive text" provider interface
    - GeminiService:          Google Gemini adapter
    - OpenAIChatService:      OpenAI-compatible chat-completions adapter
    - IdentityVerifier:       bearer token → verified Identity
    - providers:              process-wide singletons for the adapters above
"""
