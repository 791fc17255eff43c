"""Closed vocabulary of predicates and types used in catalog and audit documents."""

from podcatalog.models.document import RDF_TYPE  # noqa: F401

DS_NS = "https://w3id.org/dataspace/vocab#"
DCTERMS_NS = "http://purl.org/dc/terms/"
AS_NS = "https://www.w3.org/ns/activitystreams#"
LDP_NS = "http://www.w3.org/ns/ldp#"


class DCTERMS:
    title = f"{DCTERMS_NS}title"
    description = f"{DCTERMS_NS}description"
    created = f"{DCTERMS_NS}created"
    creator = f"{DCTERMS_NS}creator"
    subject = f"{DCTERMS_NS}subject"


class DS:
    # Types
    DataSpace = f"{DS_NS}DataSpace"
    Member = f"{DS_NS}Member"
    Asset = f"{DS_NS}Asset"
    AssetMember = f"{DS_NS}AssetMember"
    Metadata = f"{DS_NS}Metadata"
    AssetMetadata = f"{DS_NS}AssetMetadata"
    DataEntry = f"{DS_NS}DataEntry"
    # Entity header
    purpose = f"{DS_NS}purpose"
    accessMode = f"{DS_NS}accessMode"
    storageLocation = f"{DS_NS}storageLocation"
    isActive = f"{DS_NS}isActive"
    belongsToDataSpace = f"{DS_NS}belongsToDataSpace"
    category = f"{DS_NS}category"
    # Members
    memberWebId = f"{DS_NS}memberWebId"
    memberRole = f"{DS_NS}memberRole"
    joinedAt = f"{DS_NS}joinedAt"
    # Generic metadata
    metadataKey = f"{DS_NS}metadataKey"
    metadataValue = f"{DS_NS}metadataValue"
    createdBy = f"{DS_NS}createdBy"
    # Asset metadata
    metadataTitle = f"{DS_NS}metadataTitle"
    assetCreated = f"{DS_NS}assetCreated"
    assetLastModified = f"{DS_NS}assetLastModified"
    originalTitle = f"{DS_NS}originalTitle"
    openDataSourceLink = f"{DS_NS}openDataSourceLink"
    dataFormat = f"{DS_NS}dataFormat"
    chargeable = f"{DS_NS}chargeable"
    useSetting = f"{DS_NS}useSetting"
    datasourceLanguage = f"{DS_NS}datasourceLanguage"
    metadataLanguage = f"{DS_NS}metadataLanguage"
    temporalCoverageBeginning = f"{DS_NS}temporalCoverageBeginning"
    temporalCoverageEnding = f"{DS_NS}temporalCoverageEnding"
    linkedMetadata = f"{DS_NS}linkedMetadata"
    updateFrequency = f"{DS_NS}updateFrequency"
    geographicCoverage = f"{DS_NS}geographicCoverage"
    geographicExpansion = f"{DS_NS}geographicExpansion"
    resourceSize = f"{DS_NS}resourceSize"
    resourceEncoding = f"{DS_NS}resourceEncoding"
    datasourceLink = f"{DS_NS}datasourceLink"
    # Attachments
    fileName = f"{DS_NS}fileName"
    fileSize = f"{DS_NS}fileSize"
    mimeType = f"{DS_NS}mimeType"
    filePath = f"{DS_NS}filePath"
    dataSpaceId = f"{DS_NS}dataSpaceId"
    uploadedBy = f"{DS_NS}uploadedBy"
    tags = f"{DS_NS}tags"
    hasMetadata = f"{DS_NS}hasMetadata"
    # Invitations
    Invitation = f"{DS_NS}Invitation"
    fromUser = f"{DS_NS}fromUser"
    toUser = f"{DS_NS}toUser"
    dataSpaceTitle = f"{DS_NS}dataSpaceTitle"
    dataSpaceTenant = f"{DS_NS}dataSpaceTenant"
    invitedRole = f"{DS_NS}invitedRole"
    invitationStatus = f"{DS_NS}invitationStatus"
    respondedAt = f"{DS_NS}respondedAt"


class AS:
    Create = f"{AS_NS}Create"
    Update = f"{AS_NS}Update"
    Delete = f"{AS_NS}Delete"
    # PermissionChange has no ActivityStreams type of its own.
    PermissionChange = f"{AS_NS}Announce"
    actor = f"{AS_NS}actor"
    object = f"{AS_NS}object"
    target = f"{AS_NS}target"


class LDP:
    contains = f"{LDP_NS}contains"
