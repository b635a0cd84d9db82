"""
Shipped handler modules.

Every module below ``handlers.commands`` exposes ``command`` (a CommandSpec),
every module below ``handlers.contexts`` exposes ``context`` (a ContextSpec)
and every module below ``handlers.events`` exposes ``handler`` (an
EventHandlerSpec, or a list of them).
"""
