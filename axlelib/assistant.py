"""
AI copywriting helpers.

Both helpers are advisory and fail open: without OPENAI_API_KEY, or on any
error from the API, a fixed fallback text is returned.
"""
import os
from typing import Optional

from dotenv import load_dotenv
from openai import OpenAI

from axlelib.constants.constants import ASSISTANT_MODEL, ASSISTANT_MAX_TOKENS
from axlelib.utils.logger import logger, log_exception

RECOMMENDATION_FALLBACK = 'I recommend trying our specials!'

_CLIENT = None


def menu_description_fallback(item_name: str) -> str:
    return f'A tasty {item_name} prepared with fresh ingredients.'


def get_client() -> Optional[OpenAI]:
    global _CLIENT
    if _CLIENT is None:
        load_dotenv()
        api_key = os.environ.get('OPENAI_API_KEY')
        if not api_key:
            logger.warning('get_client ::: OPENAI_API_KEY not found in environment')
            return None
        _CLIENT = OpenAI(api_key=api_key)
    return _CLIENT


def generate(prompt: str, context: str = 'You write short texts for a food delivery app.') -> str:
    client = get_client()
    if client is None:
        raise RuntimeError('assistant is not configured')
    response = client.chat.completions.create(
        model=ASSISTANT_MODEL,
        messages=[
            {"role": "system", "content": context},
            {"role": "user", "content": prompt}
        ],
        max_tokens=ASSISTANT_MAX_TOKENS,
        temperature=0.7
    )
    output = (response.choices[0].message.content or '').strip()
    if not output:
        raise ValueError('assistant returned an empty text')
    return output


def suggest_menu_description(item_name: str, ingredients: str = '') -> str:
    try:
        return generate(
            f'Write a short, mouth-watering, punchy description (max 20 words) for a menu item named '
            f'"{item_name}" containing "{ingredients}". The tone should be appetizing but sleek.')
    except Exception as error:
        log_exception(error, msg=f'suggest_menu_description ::: falling back for {item_name=}')
        return menu_description_fallback(item_name)


def recommend_from_query(user_query: str, menu_context: str) -> str:
    try:
        return generate(
            f'Context Menu: {menu_context}\nUser Query: "{user_query}"\n\n'
            f'Recommend 1-2 specific items from the menu context above that match the user\'s mood or query. '
            f'Keep it brief and helpful.',
            context='You are a food concierge for Axle Delivery.')
    except Exception as error:
        log_exception(error, msg='recommend_from_query ::: falling back')
        return RECOMMENDATION_FALLBACK
