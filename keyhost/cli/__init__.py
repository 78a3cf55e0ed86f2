"""
Command line tools: schema migrations, data maintenance and the API probe.
"""
