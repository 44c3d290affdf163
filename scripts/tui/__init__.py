"""
Task Form TUI - terminal form that appends task records to a JSON list.

Architecture:
- form.py: focus ring, fields and the form state machine (no Textual)
- providers.py: Task record + store protocol
- task_store.py: JSON file store (locked, atomic append)
- views/: Textual screen/widget components
- app.py: Main application entry point
"""
