# snippet_autocompleter/core/snippet_library.py
"""
SnippetLibrary - built-in snippets plus user-defined ones.

 - built-ins are immutable and always enumerate first, in definition order
 - custom snippets follow in insertion order
 - every record is a validated `Snippet`; insertion checks name collisions
   before touching storage so a rejected add leaves the library unchanged
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from snippet_autocompleter.core.results import Result, ValidationFailure
from snippet_autocompleter.core.snippet import Category, Snippet

logger = logging.getLogger(__name__)

E, C, A = Category.ESSENTIAL, Category.COMMON, Category.ADVANCED

DEFAULT_SNIPPETS: tuple = (
    # Essential
    Snippet("service", "game:GetService() with variable",
            'local $1 = game:GetService("$2")',
            E, ("variable", "service", "initialization")),
    Snippet("function", "Function skeleton",
            "local function $1($2)\n\t$0\nend",
            E, ("function", "declaration")),
    Snippet("module", "ModuleScript template",
            "local $1 = {}\n\nfunction $1:$2($3)\n\t$0\nend\n\nreturn $1",
            E, ("module", "class", "structure")),
    Snippet("remote", "RemoteEvent handler",
            "$1.OnServerEvent:Connect(function($2)\n\t$0\nend)",
            E, ("remote", "event", "server")),
    Snippet("wait", "task.wait() loop",
            "while true do\n\ttask.wait($1)\n\t$0\nend",
            E, ("loop", "wait", "task")),
    Snippet("ifelse", "if/else statement",
            "if $1 then\n\t$2\nelse\n\t$3\nend",
            E, ("conditional", "control")),

    # Common patterns
    Snippet("for", "Numeric for loop",
            "for i = $1, $2 do\n\t$0\nend",
            C, ("loop", "iteration")),
    Snippet("forin", "pairs() iterator",
            "for key, value in pairs($1) do\n\t$0\nend",
            C, ("loop", "iteration", "table")),
    Snippet("while", "While loop",
            "while $1 do\n\t$0\nend",
            C, ("loop", "conditional")),
    Snippet("spawn", "Character spawn handler with humanoid check",
            "Players.PlayerAdded:Connect(function(player)\n"
            "\tplayer.CharacterAdded:Connect(function(character)\n"
            '\t\tlocal humanoid = character:WaitForChild("Humanoid")\n'
            "\t\thumanoid.Died:Connect(function()\n"
            "\t\t\t$1\n"
            "\t\tend)\n"
            "\t\t$0\n"
            "\tend)\n"
            "end)",
            C, ("player", "character", "event")),
    Snippet("tween", "TweenService pattern",
            "local tween = TweenService:Create($1, TweenInfo.new($2), {$3})\ntween:Play()",
            C, ("animation", "tween")),
    Snippet("signal", "BindableEvent signal pattern",
            'local signal = Instance.new("BindableEvent")\nsignal.Event:Connect(function($1)\n\t$0\nend)',
            C, ("signal", "event", "bindable")),
    Snippet("part", "Create Part instance",
            'local part = Instance.new("Part")\npart.Parent = $1\n$0',
            C, ("instance", "part", "creation")),
    Snippet("pcall", "Protected call with error handling",
            "local success, result = pcall(function()\n\t$1\nend)\n"
            "if not success then\n\twarn(result)\nend\n$0",
            C, ("error", "safety", "pcall")),

    # Advanced
    Snippet("class", "OOP class pattern with constructor and methods",
            "local $1 = {}\n$1.__index = $1\n\n"
            "function $1.new($2)\n\tlocal self = setmetatable({}, $1)\n\t$3\n\treturn self\nend\n\n"
            "function $1:$4($5)\n\t$0\nend\n\nreturn $1",
            A, ("class", "oop", "constructor")),
    Snippet("enum", "Enum-style readonly table",
            "local $1 = {\n\t$2 = $3,\n}\nsetmetatable($1, {\n"
            "\t__index = function(_, key)\n"
            '\t\terror(string.format("Invalid enum key: %s", tostring(key)), 2)\n'
            "\tend,\n"
            "\t__newindex = function()\n"
            '\t\terror("Cannot modify enum", 2)\n'
            "\tend\n})\n$0",
            A, ("enum", "constant", "readonly")),
    Snippet("maid", "Maid cleanup pattern for managing connections",
            "local Maid = {}\nMaid.__index = Maid\n\n"
            "function Maid.new()\n\treturn setmetatable({_tasks = {}}, Maid)\nend\n\n"
            "function Maid:GiveTask(task)\n\ttable.insert(self._tasks, task)\nend\n\n"
            "function Maid:DoCleaning()\n"
            "\tfor _, task in ipairs(self._tasks) do\n"
            '\t\tif typeof(task) == "RBXScriptConnection" then\n'
            "\t\t\ttask:Disconnect()\n"
            '\t\telseif typeof(task) == "function" then\n'
            "\t\t\ttask()\n"
            "\t\tend\n"
            "\tend\n"
            "\tself._tasks = {}\nend\n\nreturn Maid",
            A, ("cleanup", "maid", "memory")),
    Snippet("promise", "Promise-like async pattern",
            "local function $1($2)\n\treturn coroutine.wrap(function()\n\t\t$3\n\t\treturn $0\n\tend)()\nend",
            A, ("async", "promise", "coroutine")),
    Snippet("datastore", "DataStoreService with error handling",
            'local DataStoreService = game:GetService("DataStoreService")\n'
            'local dataStore = DataStoreService:GetDataStore("$1")\n\n'
            "local success, result = pcall(function()\n\treturn dataStore:GetAsync($2)\nend)\n"
            "if success then\n\t$0\nelse\n"
            '\twarn("DataStore error:", result)\nend',
            A, ("datastore", "persistence", "data")),
    Snippet("profileservice", "ProfileService data loading pattern",
            "local ProfileService = require($1)\n"
            'local ProfileStore = ProfileService.GetProfileStore("$2", {})\n\n'
            "local function loadProfile(player)\n"
            '\tlocal profile = ProfileStore:LoadProfileAsync("Player_" .. player.UserId)\n'
            "\tif profile then\n"
            "\t\tprofile:AddUserId(player.UserId)\n"
            "\t\tprofile:Reconcile()\n"
            "\t\tprofile:ListenToRelease(function()\n\t\t\t$3\n\t\tend)\n"
            "\t\tif player:IsDescendantOf(game.Players) then\n\t\t\t$0\n"
            "\t\telse\n\t\t\tprofile:Release()\n\t\tend\n"
            "\telse\n\t\tplayer:Kick()\n\tend\nend",
            A, ("profile", "data", "persistence")),
    Snippet("raycast", "Workspace raycast with params",
            "local raycastParams = RaycastParams.new()\n"
            "raycastParams.FilterDescendantsInstances = {$1}\n"
            "raycastParams.FilterType = Enum.RaycastFilterType.Exclude\n"
            "local result = workspace:Raycast($2, $3, raycastParams)\n"
            "if result then\n\t$0\nend",
            A, ("raycast", "physics", "detection")),
    Snippet("input", "UserInputService input handling",
            'local UserInputService = game:GetService("UserInputService")\n\n'
            "UserInputService.InputBegan:Connect(function(input, gameProcessed)\n"
            "\tif gameProcessed then return end\n"
            "\tif input.KeyCode == Enum.KeyCode.$1 then\n\t\t$0\n\tend\nend)",
            A, ("input", "keyboard", "user")),
    Snippet("context", "ContextActionService bind action",
            'local ContextActionService = game:GetService("ContextActionService")\n\n'
            "local function $1(actionName, inputState, inputObject)\n"
            "\tif inputState == Enum.UserInputState.Begin then\n\t\t$0\n\tend\nend\n\n"
            'ContextActionService:BindAction("$2", $1, false, Enum.KeyCode.$3)',
            A, ("context", "action", "input")),
    Snippet("coroutine", "Coroutine wrapper",
            "coroutine.wrap(function()\n\t$0\nend)()",
            A, ("coroutine", "async", "thread")),
)


SnippetLike = Union[Snippet, Dict[str, Any]]


class SnippetLibrary:
    """
    Repository of snippets.
    Public API:
      - default_snippets() / custom_snippets() / all_snippets()
      - get(name)
      - add_custom_snippet(snippet) -> Result
      - remove_custom_snippet(name) -> bool
      - load_custom_snippets(records) / export_custom_snippets()
      - search(query)
    """

    def __init__(self, defaults: Iterable[Snippet] = DEFAULT_SNIPPETS):
        self._defaults: tuple = tuple(defaults)
        self._custom: List[Snippet] = []

    def default_snippets(self) -> List[Snippet]:
        return list(self._defaults)

    def custom_snippets(self) -> List[Snippet]:
        return list(self._custom)

    def all_snippets(self) -> List[Snippet]:
        """Built-ins first, then custom entries; this order is the ranking tie-break order."""
        return list(self._defaults) + list(self._custom)

    def get(self, name: str) -> Optional[Snippet]:
        for s in self.all_snippets():
            if s.name == name:
                return s
        return None

    def __len__(self) -> int:
        return len(self._defaults) + len(self._custom)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    # Mutation -------------------------------------------------------------
    def _validate_new(self, snippet: SnippetLike) -> Snippet:
        if not isinstance(snippet, Snippet):
            snippet = Snippet.from_dict(snippet)
        if any(d.name == snippet.name for d in self._defaults):
            raise ValidationFailure("Snippet name conflicts with default snippet")
        if any(c.name == snippet.name for c in self._custom):
            raise ValidationFailure("Snippet name already exists")
        return snippet

    def add_custom_snippet(self, snippet: SnippetLike) -> Result:
        try:
            record = self._validate_new(snippet)
        except ValidationFailure as e:
            logger.info("rejected custom snippet: %s", e)
            return Result.failure(str(e), e)
        self._custom.append(record)
        logger.debug("added custom snippet %r", record.name)
        return Result.success(record)

    def remove_custom_snippet(self, name: str) -> bool:
        for i, s in enumerate(self._custom):
            if s.name == name:
                del self._custom[i]
                return True
        return False

    def clear_custom(self) -> None:
        self._custom.clear()

    # Persistence helpers -----------------------------------------------------
    def load_custom_snippets(self, records: Optional[Iterable[SnippetLike]]) -> int:
        """
        Replace custom snippets with saved records.
        Malformed or colliding records are skipped with a warning. Returns the number loaded.
        """
        if records is None:
            return 0
        if not isinstance(records, (list, tuple)):
            logger.warning("custom snippet setting is not a list, ignoring")
            return 0
        self._custom = []
        for rec in records:
            result = self.add_custom_snippet(rec)
            if not result:
                logger.warning("skipping saved snippet: %s", result.reason)
        return len(self._custom)

    def export_custom_snippets(self) -> List[Dict[str, Any]]:
        return [s.to_dict() for s in self._custom]

    # Lookup ---------------------------------------------------------------
    def search(self, query: str) -> List[Snippet]:
        """Case-insensitive substring filter over name, description and tags."""
        if not query or not query.strip():
            return self.all_snippets()
        q = query.strip().lower()
        out = []
        for s in self.all_snippets():
            if q in s.name.lower() or q in s.description.lower() or any(q in t for t in s.tags_lower):
                out.append(s)
        return out

    def by_category(self, category: Union[str, Category]) -> List[Snippet]:
        cat = Category(category)
        return [s for s in self.all_snippets() if s.category is cat]
