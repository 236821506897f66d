import aiohttp

from bookshelf.internal.env_settings import Settings


async def get_connection():
    timeout = aiohttp.ClientTimeout(total=Settings().app.http_timeout)
    async with aiohttp.ClientSession(timeout=timeout) as session:
        yield session
