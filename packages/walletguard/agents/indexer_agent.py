from uagents import Agent, Context

from ..config import Settings, configure_logging
from ..indexer.scheduler import IndexingScheduler
from ..server import build_scheduler


def make_index_handler(scheduler: IndexingScheduler):
    async def index(ctx: Context):
        report = await scheduler.tick()
        ctx.logger.info(f"Indexer agent stored {len(report.stored)} wallets, {len(report.failed)} failed")
        for address, error in report.failed.items():
            ctx.logger.warning(f"Indexing failed for {address}: {error}")

    return index


def build_agent(settings: Settings, scheduler: IndexingScheduler) -> Agent:
    agent = Agent(name="indexer-agent", seed=settings.agent_seed)
    agent.on_interval(period=settings.index_interval)(make_index_handler(scheduler))
    return agent


if __name__ == "__main__":
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    build_agent(settings, build_scheduler(settings)).run()
