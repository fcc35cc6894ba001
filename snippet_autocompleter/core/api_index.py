# snippet_autocompleter/core/api_index.py
# Bundled, offline API name index (services, instance classes, enums) with substring search.

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

SERVICES: Tuple[str, ...] = (
    "Workspace", "Players", "ReplicatedStorage", "ServerScriptService", "ServerStorage",
    "StarterGui", "StarterPlayer", "StarterPack", "Lighting", "SoundService", "Chat", "Teams",
    "BadgeService", "GamePassService", "MarketplaceService", "TeleportService",
    "DataStoreService", "HttpService", "InsertService", "TweenService", "UserInputService",
    "ContextActionService", "GuiService", "TextService", "TextChatService", "VoiceChatService",
    "LocalizationService", "PolicyService", "RunService", "CollectionService", "PhysicsService",
    "PathfindingService", "ProximityPromptService", "SocialService", "MemoryStoreService",
    "MessagingService", "ReplicatedFirst", "ScriptContext", "Selection", "ChangeHistoryService",
    "LogService", "StudioService", "TestService", "VRService", "AssetService", "GroupService",
)

INSTANCES: Tuple[str, ...] = (
    # parts and models
    "Part", "MeshPart", "UnionOperation", "TrussPart", "WedgePart", "CornerWedgePart",
    "SpawnLocation", "Model", "WorldModel", "Folder",
    # ui
    "ScreenGui", "BillboardGui", "SurfaceGui", "Frame", "ScrollingFrame", "TextLabel", "TextBox",
    "TextButton", "ImageLabel", "ImageButton", "ViewportFrame", "VideoFrame", "UIListLayout",
    "UIGridLayout", "UITableLayout", "UIPageLayout", "UIPadding", "UIAspectRatioConstraint",
    "UISizeConstraint", "UITextSizeConstraint", "UICorner", "UIStroke", "UIGradient", "UIScale",
    # effects and lighting
    "Fire", "Smoke", "Sparkles", "ParticleEmitter", "Beam", "Trail", "Atmosphere", "Sky", "Clouds",
    "BloomEffect", "BlurEffect", "ColorCorrectionEffect", "DepthOfFieldEffect", "SunRaysEffect",
    "PointLight", "SpotLight", "SurfaceLight",
    # humanoid
    "Humanoid", "HumanoidDescription", "Accessory", "Shirt", "Pants", "ShirtGraphic", "BodyColors",
    # sound
    "Sound", "SoundGroup", "EqualizerSoundEffect", "ReverbSoundEffect", "DistortionSoundEffect",
    "ChorusSoundEffect", "FlangeSoundEffect", "PitchShiftSoundEffect", "TremoloSoundEffect",
    "CompressorSoundEffect",
    # scripts, events, values
    "Script", "LocalScript", "ModuleScript", "RemoteEvent", "RemoteFunction", "BindableEvent",
    "BindableFunction", "StringValue", "IntValue", "NumberValue", "BoolValue", "ObjectValue",
    "Vector3Value", "CFrameValue", "Color3Value", "BrickColorValue", "RayValue",
    # constraints
    "HingeConstraint", "BallSocketConstraint", "RopeConstraint", "RodConstraint",
    "SpringConstraint", "PrismaticConstraint", "CylindricalConstraint", "UniversalConstraint",
    "WeldConstraint", "RigidConstraint", "NoCollisionConstraint", "AlignOrientation",
    "AlignPosition", "VectorForce", "Torque", "LineForce",
    # animation, camera, tools, misc
    "Animation", "AnimationController", "Animator", "Keyframe", "KeyframeSequence", "Camera",
    "Tool", "HopperBin", "Attachment", "Bone", "TerrainRegion", "Configuration", "Decal",
    "Texture", "SurfaceAppearance", "ProximityPrompt", "Highlight", "SelectionBox",
    "ClickDetector", "TouchTransmitter",
)

ENUMS: Tuple[str, ...] = (
    "KeyCode", "UserInputType", "Material", "PartType", "FormFactor", "EasingStyle",
    "EasingDirection", "RaycastFilterType", "NormalId", "Axis", "Font", "TextXAlignment",
    "TextYAlignment", "AutomaticSize", "FillDirection", "HorizontalAlignment",
    "VerticalAlignment", "SizeConstraint", "AspectType", "UIListLayout", "SortOrder",
    "ScaleType", "TweenStatus", "AnimationPriority", "HumanoidRigType", "HumanoidStateType",
    "JointCreationMode", "CollisionFidelity", "RenderFidelity", "BodyPart", "Limb", "ChatMode",
    "ChatColor", "Platform", "DeviceType", "VRTouchpad", "VRTouchpadMode", "PlayerActions",
    "MouseBehavior", "FramerateManagerMode", "SaveFilter", "RenderPriority", "ExplosionType",
    "SpecialMesh", "MeshType", "PathStatus", "PathWaypointAction", "TeleportState",
    "TeleportType", "ThumbnailType", "ThumbnailSize", "AvatarJointUpgrade", "QualityLevel",
    "GraphicsMode",
)

KINDS: Dict[str, Tuple[str, ...]] = {
    "services": SERVICES,
    "instances": INSTANCES,
    "enums": ENUMS,
}


def _search(names: Tuple[str, ...], query: Optional[str]) -> List[str]:
    if not query:
        return list(names)
    q = query.lower()
    return [n for n in names if q in n.lower()]


def search_services(query: Optional[str] = None) -> List[str]:
    return _search(SERVICES, query)


def search_instance_types(query: Optional[str] = None) -> List[str]:
    return _search(INSTANCES, query)


def search_enums(query: Optional[str] = None) -> List[str]:
    return _search(ENUMS, query)


def search(query: Optional[str] = None, kind: Optional[str] = None) -> Dict[str, List[str]]:
    """Search one kind ("services", "instances", "enums") or all of them."""
    if kind is not None and kind not in KINDS:
        raise KeyError(f"unknown API kind: {kind}")
    kinds = [kind] if kind else list(KINDS)
    return {k: _search(KINDS[k], query) for k in kinds}


def stats() -> Dict[str, int]:
    return {k: len(v) for k, v in KINDS.items()}
