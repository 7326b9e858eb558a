"""
Services layer - business logic for issues, metrics and budgets.

Routes stay thin: they parse the request, call one service method and wrap
the result in the {"ok": true, ...} envelope.
"""
