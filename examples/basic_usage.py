import math
import numpy as np
from sceneframe import Transform, to_persisted

if __name__ == "__main__":
    # a camera two units back and one up, looking at the origin
    camera = Transform.lookAt((0, 1, 2), (0, 0, 0))
    print("camera:", camera)
    print("look vector:", camera.LookVector)

    # a part parented to the camera, half a turn about its up axis
    offset = Transform.new(0, 0, -1) * Transform.Angles(0, math.pi, 0)
    part = camera * offset
    print("part position:", part.Position)

    # back into the camera's frame
    print("relative:", camera.ToObjectSpace(part).fuzzy_eq(offset))

    # halfway between the camera and the part
    print("midpoint:", camera.Lerp(part, 0.5).Position)

    print("components:", part.GetComponents())
    print("persisted:", to_persisted(part).to_dict())
    print("point:", part * np.array([1.0, 0.0, 0.0]))
