"""
Generation of the Relay environment module.

The module is assembled from fixed fragments depending on the language
variant, the toolchain (Next.js needs a per-request environment) and
whether GraphQL subscriptions over websockets are wanted.
"""

from typing import List

from relaykit.config import GRAPHQL_WS_PACKAGE, RELAY_ENV, RELAY_RUNTIME_PACKAGE, get_settings
from relaykit.schemas import Toolchain
from relaykit.tasks.base import ProjectTask, TaskOutcome

HTTP_ENDPOINT = "HTTP_ENDPOINT"
WEBSOCKET_ENDPOINT = "WEBSOCKET_ENDPOINT"

FETCH_FN = """\
const fetchFn: FetchFunction = async (request, variables) => {
  const resp = await fetch(HTTP_ENDPOINT, {
    method: "POST",
    headers: {
      Accept: "application/json",
      "Content-Type": "application/json",
      // <-- Additional headers like 'Authorization' would go here
    },
    body: JSON.stringify({
      query: request.text, // <-- The GraphQL document composed by Relay
      variables,
    }),
  });

  return await resp.json();
};"""

SUBSCRIPTIONS_CLIENT = """\
const subscriptionsClient = createClient({
  url: WEBSOCKET_ENDPOINT,
});"""

SUBSCRIBE_FN_TS = """\
const subscribeFn: SubscribeFunction = (request, variables) => {
  // To understand why we return Observable<any>,
  // please see: https://github.com/enisdenjo/graphql-ws/issues/316#issuecomment-1047605774
  return Observable.create<any>((sink) => {
    if (!request.text) {
      return sink.error(new Error("Operation text cannot be empty"));
    }

    return subscriptionsClient.subscribe(
      {
        operationName: request.name,
        query: request.text,
        variables,
      },
      sink
    );
  });
};"""

SUBSCRIBE_FN_JS = """\
const subscribeFn = (request, variables) => {
  return Observable.create((sink) => {
    if (!request.text) {
      return sink.error(new Error("Operation text cannot be empty"));
    }

    return subscriptionsClient.subscribe(
      {
        operationName: request.name,
        query: request.text,
        variables,
      },
      sink
    );
  });
};"""

CREATE_ENV = """\
function createRelayEnvironment() {
  return new Environment({
    network: Network.create(fetchFn),
    store: new Store(new RecordSource()),
  });
}"""

NEXT_INIT_ENV = """\
let relayEnvironment: Environment | undefined;

export function initRelayEnvironment(initialRecords?: RecordMap) {
  const environment = relayEnvironment ?? createRelayEnvironment();

  // If your page has Next.js data fetching methods that use Relay,
  // the initial records will get hydrated here.
  if (initialRecords) {
    environment.getStore().publish(new RecordSource(initialRecords));
  }

  // For SSG and SSR always create a new Relay environment.
  if (typeof window === "undefined") {
    return environment;
  }

  // Create the Relay environment once in the client
  // and then reuse it.
  if (!relayEnvironment) {
    relayEnvironment = environment;
  }

  return relayEnvironment;
}"""


class CodeBuilder:
    def __init__(self, line_ending: str = "\n"):
        self._lines: List[str] = []
        self.line_ending = line_ending

    @property
    def code(self) -> str:
        return "".join(line + self.line_ending for line in self._lines)

    def add_line(self, line: str = "") -> None:
        self._lines.extend(line.split("\n"))


def render_relay_environment(
    typescript: bool,
    subscriptions: bool,
    next_js: bool,
    http_endpoint: str,
    websocket_endpoint: str,
) -> str:
    """Source of the Relay environment module for the given variant."""
    b = CodeBuilder()

    relay_runtime_imports = ["Environment", "Network", "RecordSource", "Store"]
    if subscriptions:
        relay_runtime_imports.append("Observable")

    if typescript:
        relay_runtime_imports.append("FetchFunction")
        if subscriptions:
            relay_runtime_imports.append("SubscribeFunction")
        if next_js:
            b.add_line('import type { RecordMap } from "relay-runtime/lib/store/RelayStoreTypes";')

    b.add_line(f'import {{ {", ".join(relay_runtime_imports)} }} from "{RELAY_RUNTIME_PACKAGE}";')
    if subscriptions:
        b.add_line(f'import {{ createClient }} from "{GRAPHQL_WS_PACKAGE}";')
    b.add_line()

    b.add_line(f'const {HTTP_ENDPOINT} = "{http_endpoint}";')
    if subscriptions:
        b.add_line(f'const {WEBSOCKET_ENDPOINT} = "{websocket_endpoint}";')
    b.add_line()

    fetch_fn = FETCH_FN
    if not typescript:
        fetch_fn = fetch_fn.replace("fetchFn: FetchFunction", "fetchFn")
    b.add_line(fetch_fn)
    b.add_line()

    create_env = CREATE_ENV
    if subscriptions:
        b.add_line(SUBSCRIPTIONS_CLIENT)
        b.add_line()
        b.add_line(SUBSCRIBE_FN_TS if typescript else SUBSCRIBE_FN_JS)
        b.add_line()
        create_env = create_env.replace("Network.create(fetchFn)", "Network.create(fetchFn, subscribeFn)")

    b.add_line(create_env)
    b.add_line()

    if next_js:
        init_env = NEXT_INIT_ENV
        if not typescript:
            init_env = init_env.replace("initialRecords?: RecordMap", "initialRecords")
            init_env = init_env.replace(": Environment | undefined", "")
        b.add_line(init_env)
    else:
        b.add_line(f"export const {RELAY_ENV} = createRelayEnvironment();")

    return b.code


class GenerateRelayEnvironmentTask(ProjectTask):
    label = "Generate Relay environment"

    def run(self) -> TaskOutcome:
        relay_env_file = self.context.relay_env_file
        self.update_label(f"{self.label} {relay_env_file.rel}")

        if self.fs.exists(relay_env_file.abs):
            return TaskOutcome.skipped("File exists")

        settings = get_settings()
        code = render_relay_environment(
            typescript=self.context.typescript,
            subscriptions=self.context.subscriptions,
            next_js=self.context.uses(Toolchain.NEXT),
            http_endpoint=settings.http_endpoint,
            websocket_endpoint=settings.websocket_endpoint,
        )

        self.fs.create_directory(relay_env_file.parent_directory)
        self.fs.write(relay_env_file.abs, code)
        return TaskOutcome.succeeded()
