import asyncio

from dotenv import load_dotenv
load_dotenv()

from core.categories import category_registry
from core.common.log import logger


async def init_categories() -> int:
    """部署时执行一次: 分类表为空时写入默认分类"""
    inserted = await category_registry.bootstrap()
    if inserted:
        logger.info(f"初始化分类成功, 共 {inserted} 个")
    return inserted


async def init():
    await init_categories()


if __name__ == "__main__":
    asyncio.run(init())
