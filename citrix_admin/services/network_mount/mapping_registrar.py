"""Mapping Registrar - binds every configured drive with one verified credential."""

import logging
from typing import List, Optional, Sequence

from .base_binder import BaseResourceBinder
from .namespace_refresher import NamespaceRefresher, NullRefresher
from ...core.exceptions import BindFailure
from ...models import AttemptResult, Credential, MappingTarget


class MappingRegistrar:
    """SRP: Drive registration ONLY. One failing drive never stops the others."""

    def __init__(self, binder: BaseResourceBinder, refresher: Optional[NamespaceRefresher] = None):
        self._binder = binder
        self._refresher = refresher or NullRefresher()

    async def register_all(
        self, targets: Sequence[MappingTarget], credential: Credential, persistent: bool = True
    ) -> List[AttemptResult]:
        results: List[AttemptResult] = []

        for target in targets:
            logging.info(f"Registering {target.drive} -> {target.remote_path}")
            try:
                result = await self._binder.bind(target, credential, persistent=persistent)
            except BindFailure as e:
                result = AttemptResult.failed(e.code, str(e), target)

            if not result.success:
                logging.error(f"{target.drive} not mapped (error {result.code}): {result.message}")
            results.append(result)

        succeeded = sum(1 for result in results if result.success)
        logging.info(f"Drive mapping finished: {succeeded}/{len(results)} mapped")

        await self._refresher.refresh()
        return results
