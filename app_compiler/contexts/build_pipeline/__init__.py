"""
Build pipeline bounded context.

domain/          classification, outcomes, failure policy, watch policy table
infrastructure/  pipelines (scripts, styles, assets), batch runner, watch mode
"""
