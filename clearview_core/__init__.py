"""
Core editing logic for ClearView AI.

Nothing in this package touches Streamlit: payload handling, upload intake,
the mask canvas, the comparison slider model, prompt building, the Gemini
client and the controller state machine can all be driven from plain Python.
"""
