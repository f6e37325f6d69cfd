"""Translation providers used to fill the phrase mapping.

Every provider implements :class:`TranslationService`. Requests inside one
batch are issued concurrently and collected by phrase; successive batches are
separated by a fixed delay to stay under the providers' rate limits.
"""

import hashlib
import json
import logging
import random
import ssl
import time
import urllib.error
import urllib.parse
import urllib.request
import uuid
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional, Sequence

import certifi

from ..utils.config import (
    BaiduCredentials,
    CredentialsConfig,
    DoubaoCredentials,
    GoogleCredentials,
    YoudaoCredentials,
)

logger = logging.getLogger(__name__)

SSL_CONTEXT = ssl.create_default_context(cafile=certifi.where())


class TranslationError(Exception):
    """Raised when a provider cannot translate a text or a batch."""


class TranslationService(ABC):
    """Interface the mapping generator talks to."""

    name: str = ''

    @abstractmethod
    def translate(self, text: str) -> str:
        """
        Translate a single phrase.

        Raises:
            TranslationError: On any failure
        """
        pass

    @abstractmethod
    def batch_translate(self, texts: Sequence[str]) -> Dict[str, Optional[str]]:
        """
        Translate many phrases.

        Returns:
            Mapping phrase -> translation; a phrase may map to None or be
            missing when its own request failed.

        Raises:
            TranslationError: When the whole batch is unusable
        """
        pass


class BatchingTranslator(TranslationService):
    """
    Base for HTTP providers.

    Subclasses implement :meth:`translate`; batching, pacing and the
    concurrent fan-out inside a batch live here.
    """

    batch_size = 3
    batch_delay = 3.0

    def __init__(
        self,
        credentials,
        batch_size: Optional[int] = None,
        batch_delay: Optional[float] = None,
        timeout: float = 10.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.credentials = credentials
        if batch_size is not None:
            self.batch_size = batch_size
        if batch_delay is not None:
            self.batch_delay = batch_delay
        self.timeout = timeout
        self._sleep = sleep

    @property
    def is_configured(self) -> bool:
        return self.credentials.is_configured

    def batch_translate(self, texts: Sequence[str]) -> Dict[str, Optional[str]]:
        if not self.is_configured:
            raise TranslationError(f"{self.name}: credentials are not configured")

        unique = list(dict.fromkeys(texts))
        results: Dict[str, Optional[str]] = {}

        for start in range(0, len(unique), self.batch_size):
            if start:
                self._sleep(self.batch_delay)
            batch = unique[start:start + self.batch_size]
            logger.debug("%s: batch %d-%d of %d", self.name, start + 1, start + len(batch), len(unique))
            results.update(self._translate_batch(batch))

        return results

    def _translate_batch(self, batch: List[str]) -> Dict[str, Optional[str]]:
        with ThreadPoolExecutor(max_workers=len(batch)) as executor:
            futures = {text: executor.submit(self._translate_or_none, text) for text in batch}
            return {text: future.result() for text, future in futures.items()}

    def _translate_or_none(self, text: str) -> Optional[str]:
        try:
            return self.translate(text)
        except TranslationError as e:
            logger.warning("%s: could not translate '%s': %s", self.name, text, e)
            return None

    def _request_json(
        self,
        url: str,
        params: Optional[Dict[str, str]] = None,
        form: Optional[Dict[str, str]] = None,
        json_body: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """
        Send a GET (params only) or POST (form / JSON body) request.

        Raises:
            TranslationError: On network errors or non-JSON responses
        """
        if params:
            url = f"{url}?{urllib.parse.urlencode(params)}"

        headers = dict(headers or {})
        body = None
        if json_body is not None:
            body = json.dumps(json_body, ensure_ascii=False).encode('utf-8')
            headers['Content-Type'] = 'application/json'
        elif form is not None:
            body = urllib.parse.urlencode(form).encode('utf-8')
            headers['Content-Type'] = 'application/x-www-form-urlencoded'

        request = urllib.request.Request(url, data=body, headers=headers)
        try:
            with urllib.request.urlopen(request, timeout=self.timeout, context=SSL_CONTEXT) as response:
                return json.loads(response.read().decode('utf-8'))
        except urllib.error.HTTPError as e:
            raise TranslationError(f"{self.name}: HTTP {e.code} {e.reason}") from e
        except (urllib.error.URLError, OSError) as e:
            raise TranslationError(f"{self.name}: network error: {e}") from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise TranslationError(f"{self.name}: invalid response: {e}") from e


class BaiduTranslator(BatchingTranslator):
    """
    Baidu general translation API.

    Baidu accepts several lines in one query, so a whole batch is one
    request. A batch that fails is retried phrase by phrase.
    """

    name = 'baidu'
    URL = 'https://fanyi-api.baidu.com/api/trans/vip/translate'
    batch_size = 20
    batch_delay = 5.0
    RATE_LIMIT_CODE = '54003'
    RETRY_DELAYS = (5.0, 10.0, 15.0)
    SINGLE_DELAY = 1.0

    def __init__(self, credentials: BaiduCredentials, **kwargs):
        super().__init__(credentials, **kwargs)

    def sign(self, query: str, salt: str) -> str:
        raw = f"{self.credentials.app_id}{query}{salt}{self.credentials.secret_key}"
        return hashlib.md5(raw.encode('utf-8')).hexdigest()

    def _query(self, query: str) -> List[str]:
        """Run one query, retrying on the rate-limit error; returns one result per line."""
        for attempt in range(len(self.RETRY_DELAYS) + 1):
            salt = str(random.randint(32768, 65536))
            data = self._request_json(self.URL, params={
                'q': query,
                'from': 'zh',
                'to': 'en',
                'appid': self.credentials.app_id,
                'salt': salt,
                'sign': self.sign(query, salt),
            })
            if not isinstance(data, dict):
                raise TranslationError(f"baidu: unexpected response: {data!r}")

            error_code = str(data.get('error_code', ''))
            if not error_code or error_code == '52000':
                try:
                    return [item['dst'] for item in data['trans_result']]
                except (KeyError, TypeError) as e:
                    raise TranslationError(f"baidu: unexpected response shape: {data}") from e

            message = data.get('error_msg', '')
            rate_limited = error_code == self.RATE_LIMIT_CODE or 'Invalid Access Limit' in message
            if rate_limited and attempt < len(self.RETRY_DELAYS):
                delay = self.RETRY_DELAYS[attempt]
                logger.warning("baidu: rate limited, retrying in %.0fs", delay)
                self._sleep(delay)
                continue

            raise TranslationError(f"baidu: error {error_code}: {message}")

        raise TranslationError("baidu: rate limit retries exhausted")

    def translate(self, text: str) -> str:
        return '\n'.join(self._query(text))

    def _translate_batch(self, batch: List[str]) -> Dict[str, Optional[str]]:
        try:
            results = self._query('\n'.join(batch))
            if len(results) == len(batch):
                return dict(zip(batch, results))
            logger.warning("baidu: %d results for %d phrases, retrying one by one", len(results), len(batch))
        except TranslationError as e:
            logger.warning("baidu: batch failed (%s), retrying one by one", e)

        translated: Dict[str, Optional[str]] = {}
        for index, text in enumerate(batch):
            if index:
                self._sleep(self.SINGLE_DELAY)
            translated[text] = self._translate_or_none(text)
        return translated


class YoudaoTranslator(BatchingTranslator):
    """Youdao text translation API (v3 signature)."""

    name = 'youdao'
    URL = 'https://openapi.youdao.com/api'

    def __init__(self, credentials: YoudaoCredentials, clock: Callable[[], float] = time.time, **kwargs):
        super().__init__(credentials, **kwargs)
        self._clock = clock

    @staticmethod
    def truncate(text: str) -> str:
        """Signature input: the text itself, or head + length + tail for long texts."""
        if len(text) <= 20:
            return text
        return f"{text[:10]}{len(text)}{text[-10:]}"

    def sign(self, text: str, salt: str, curtime: str) -> str:
        raw = f"{self.credentials.app_key}{self.truncate(text)}{salt}{curtime}{self.credentials.app_secret}"
        return hashlib.sha256(raw.encode('utf-8')).hexdigest()

    def translate(self, text: str) -> str:
        salt = str(uuid.uuid4())
        curtime = str(int(self._clock()))
        data = self._request_json(self.URL, form={
            'q': text,
            'from': 'zh-CHS',
            'to': 'en',
            'appKey': self.credentials.app_key,
            'salt': salt,
            'sign': self.sign(text, salt, curtime),
            'signType': 'v3',
            'curtime': curtime,
        })

        if not isinstance(data, dict):
            raise TranslationError(f"youdao: unexpected response: {data!r}")
        if str(data.get('errorCode')) != '0' or not data.get('translation'):
            raise TranslationError(f"youdao: error {data.get('errorCode')}")
        return data['translation'][0]


class GoogleTranslator(BatchingTranslator):
    """Google Cloud Translation v2 (API key)."""

    name = 'google'
    URL = 'https://translation.googleapis.com/language/translate/v2'

    def __init__(self, credentials: GoogleCredentials, **kwargs):
        super().__init__(credentials, **kwargs)

    def translate(self, text: str) -> str:
        data = self._request_json(self.URL, form={
            'key': self.credentials.api_key,
            'q': text,
            'source': 'zh',
            'target': 'en',
            'format': 'text',
        })
        try:
            return data['data']['translations'][0]['translatedText']
        except (KeyError, IndexError, TypeError) as e:
            error = data.get('error', {}).get('message', data) if isinstance(data, dict) else data
            raise TranslationError(f"google: {error}") from e


class DoubaoTranslator(BatchingTranslator):
    """Doubao (Volcano Engine) chat-completions model used as a translator."""

    name = 'doubao'
    batch_size = 5
    batch_delay = 2.0
    PROMPT = '请将以下中文翻译成英文，只返回翻译结果，不要其他解释：{text}'

    def __init__(self, credentials: DoubaoCredentials, **kwargs):
        super().__init__(credentials, **kwargs)

    def translate(self, text: str) -> str:
        data = self._request_json(
            self.credentials.url,
            json_body={
                'model': self.credentials.model,
                'messages': [{'role': 'user', 'content': self.PROMPT.format(text=text)}],
            },
            headers={'Authorization': f'Bearer {self.credentials.api_key}'},
        )
        try:
            content = data['choices'][0]['message']['content']
        except (KeyError, IndexError, TypeError) as e:
            raise TranslationError(f"doubao: unexpected response shape: {data}") from e
        content = content.strip()
        if not content:
            raise TranslationError("doubao: empty translation")
        return content


TRANSLATORS = {
    BaiduTranslator.name: BaiduTranslator,
    YoudaoTranslator.name: YoudaoTranslator,
    GoogleTranslator.name: GoogleTranslator,
    DoubaoTranslator.name: DoubaoTranslator,
}


def create_translator(provider: str, credentials: CredentialsConfig, **kwargs) -> BatchingTranslator:
    """
    Build the translator for ``provider`` with its credentials.

    Raises:
        ValueError: If the provider is unknown
    """
    try:
        translator_class = TRANSLATORS[provider]
    except KeyError:
        raise ValueError(
            f"Unknown translation provider '{provider}'. Valid options: {', '.join(TRANSLATORS)}"
        ) from None
    return translator_class(credentials.for_provider(provider), **kwargs)
