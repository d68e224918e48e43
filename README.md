# dmnd_client

Building blocks of a mining proxy that sits between SV1 miners and an
upstream pool. The package tracks the health of every part of the proxy,
relays mining messages to the pool and matches the pool's share
acknowledgements back to them, maps the job ids handed to miners onto the
pool's own job ids, manages the background asyncio tasks of each component
and reports shares, worker activity and error logs to a monitoring server.

## Modules

- `dmnd_client.proxy_state` – `ProxyState` records whether the pool, template
  provider, job declarator, share accounter, translator, downstreams and
  upstreams are up, plus an optional internal inconsistency code. Each part
  has an `update_*` method; `get_errors()` lists the failing parts as
  `ComponentError` values in a fixed order, `is_proxy_down()` returns a flag
  with a readable description, and `update_proxy_state_up()` marks
  everything up again. Access is guarded by a lock.
- `dmnd_client.errors` – the exceptions `PoolConnectionError`,
  `ShareAccounterError`, `MonitorError` and `TranslatorError`, each carrying
  a `kind` from its own enum (`PoolErrorKind`, `ShareAccounterErrorKind`,
  `TranslatorErrorKind`), and the `Sv1IngressError` enum.
- `dmnd_client.tasks` – `AbortHandle` groups asyncio tasks so they can be
  cancelled together (also usable as a context manager), and `TaskManager`
  keeps registered relay tasks alive until the aborter it hands out once via
  `get_aborter()` is aborted.
- `dmnd_client.utils` – `sv1_rolling` picks the version-rolling mask and
  minimum bit count offered to a miner, restricting the mask to
  `0x1FFFE000`; `UserId` wraps a numeric user id.
- `dmnd_client.monitor` – `ShareInfo`, `WorkerActivity` and `ProxyLog`
  records with `to_dict()`, the `MonitorAPI` HTTP client (httpx) with
  `send_shares`, `send_log` and `send_worker_activity`, `SharesMonitor`,
  which collects shares and sends them in batches with `flush` or
  periodically with `monitor`, and `SendLogHandler`, a `logging.Handler`
  that forwards error records to the server.
- `dmnd_client.share_accounter` – `start` runs two relays over asyncio
  queues: mining messages go up to the pool wrapped in `PoolMessage`, and
  the pool's `ShareOk` acknowledgements come back down as
  `SubmitSharesSuccess` for the channel and sequence number of the matching
  `SubmitSharesExtended`. An unknown acknowledgement or an unexpected
  message marks the pool as down. `None` on a queue ends the stream.
- `dmnd_client.jobs` – `Notify` jobs, `RecentJobs`, which stores the last
  three jobs under their pool ids and hands out a fresh random 32-bit
  miner-side id each time a job is sent, `apply_mask` and `CircularBuffer`.
- `dmnd_client.downstream_tasks` – `DownstreamTaskManager` groups tasks by
  miner connection and can abort all tasks of one connection with `kill`;
  `start_send_to_downstream` writes each outgoing message to the miner as a
  line of JSON.

## Examples

Tracking proxy health:

```python
from dmnd_client.proxy_state import PoolState, ProxyState

state = ProxyState()
state.update_pool_state(PoolState.DOWN)
state.is_proxy_down()          # (True, "[Pool(Down)]")
state.update_proxy_state_up()
state.is_proxy_down()          # (False, None)
```

Choosing version rolling parameters:

```python
from dmnd_client.utils import sv1_rolling

sv1_rolling(0xFFFFFFFF, 16)    # (0x1FFFE000, 16)
sv1_rolling(None, None)        # (0, 0)
```

Mapping job ids for miners:

```python
from dmnd_client.jobs import Notify, RecentJobs

jobs = RecentJobs()
job = Notify(
    job_id="42", prev_hash="00" * 32, coin_base1="ffff", coin_base2="ffff",
    merkle_branch=(), version=0x20000000, bits=0x1D00FFFF, time=0,
    clean_jobs=True,
)
sent = jobs.add_job(job, mask=0x1FFFE000)   # same job under a new miner-side id
jobs.get_matching_job(int(sent.job_id))     # the stored job, job_id "42"
```

Reporting shares:

```python
from dmnd_client.monitor import MonitorAPI, ShareInfo, SharesMonitor

api = MonitorAPI("http://localhost:8787", token="token")
shares = SharesMonitor()
shares.insert_share(ShareInfo("worker.1", 1000.0, 7))
# await shares.flush(api) sends the batch and clears what was delivered
```

## What the package does not do

There is no command to run and no complete proxy here. The package does not
open the connection to the pool or perform its handshake, does not listen
for SV1 miners or parse their messages, and does not adjust miners'
difficulty; it provides the state, relays, job tracking, task management and
monitoring client that such a proxy is built from.

## Tests

The test suite uses pytest, pytest-asyncio and respx, available through the
`test` extra.