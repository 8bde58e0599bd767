"""
Editor Engine

Graph model, validation and gesture sequencing for the DAG canvas editor.
"""
