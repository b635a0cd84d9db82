from commands.command_spec import ContextSpec, ContextType


async def run(ctx, args):
    return f"profile of {args['target']}"


context = ContextSpec(name="Profile", type=ContextType.USER, entry=run)
