"""
Subscription Auth Service Django project.
"""
