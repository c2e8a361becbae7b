"""
Annotator — classification + styles + identifiers, computed once per component.

The result is an immutable AnnotatedComponent; the template, style and
catalog emitters only read it, so their class names and prop names cannot
drift apart.
"""

from typing import Optional

from .classifier import Classifier
from .models import (
    AnnotatedComponent,
    AnnotatedNode,
    DesignNode,
    Identifier,
    NodeRole,
    StyleRecord,
)
from .naming_engine import ElementNamer, NamingConfig
from .style_extractor import extract_style, extract_text_style


def first_text_style(node: DesignNode):
    for descendant in node.walk():
        style = extract_text_style(descendant)
        if style is not None:
            return style
    return None


class ComponentAnnotator:

    def __init__(self, classifier: Optional[Classifier] = None, naming: Optional[NamingConfig] = None):
        self.classifier = classifier or Classifier()
        self.naming = naming or NamingConfig()

    def annotate(self, component: DesignNode, component_name: str) -> AnnotatedComponent:
        namer = ElementNamer(self.naming)
        text_props: list[tuple[str, str]] = []
        asset_ids: list[str] = []

        root_id = Identifier(component_name=component_name)
        root_image = None
        root_role = self.classifier(component)
        if root_role.is_asset:
            # 根節點本身是資產：它排在第一個，成為 imageSrc 綁定的主要圖片
            root_image = AnnotatedNode(
                node=component,
                role=root_role,
                identifier=Identifier(component_name=component_name, element_class=namer.resolve("image")),
                style=StyleRecord(width="100%", height="100%"),
            )
            asset_ids.append(component.id)
        layout = component.layout
        root_axis = layout.axis if layout else None
        children = self._annotate_children(component.children, component_name, root_axis, namer, text_props, asset_ids)
        # 組件根節點永遠當作外層容器；若它符合資產條件，圖片另以 root_image 輸出
        root = AnnotatedNode(
            node=component,
            role=NodeRole.CONTAINER,
            identifier=root_id,
            style=extract_style(component, is_root=True, root_text=first_text_style(component)),
            children=children,
        )
        return AnnotatedComponent(
            source=component,
            identifier=root_id,
            root=root,
            text_props=tuple(text_props),
            asset_node_ids=tuple(asset_ids),
            root_image=root_image,
        )

    def _annotate_children(self, nodes, component_name, parent_axis, namer, text_props, asset_ids) -> tuple:
        annotated = []
        for child in nodes:
            result = self._annotate_node(child, component_name, parent_axis, namer, text_props, asset_ids)
            if result is not None:
                annotated.append(result)
        return tuple(annotated)

    def _annotate_node(
        self,
        node: DesignNode,
        component_name: str,
        parent_axis: Optional[str],
        namer: ElementNamer,
        text_props: list,
        asset_ids: list,
    ) -> Optional[AnnotatedNode]:
        role = self.classifier(node)
        if role is NodeRole.DECORATION:
            return None

        # 先登記自己的名稱再處理子節點（前序，先到先得）
        identifier = Identifier(component_name=component_name, element_class=namer.resolve(node.name))
        text_prop = None
        if role is NodeRole.TEXT:
            text_prop = f"text{len(text_props) + 1}"
            text_props.append((text_prop, node.characters))
        if role.is_asset:
            asset_ids.append(node.id)

        style = extract_style(node, parent_axis=parent_axis, is_asset=role.is_asset)

        children = ()
        if role is NodeRole.CONTAINER:
            axis = node.layout.axis if node.layout else None
            children = self._annotate_children(node.children, component_name, axis, namer, text_props, asset_ids)

        return AnnotatedNode(
            node=node,
            role=role,
            identifier=identifier,
            style=style,
            text_prop=text_prop,
            children=children,
        )


def annotate_component(component: DesignNode, component_name: str) -> AnnotatedComponent:
    return ComponentAnnotator().annotate(component, component_name)

